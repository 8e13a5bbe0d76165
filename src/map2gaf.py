#!/usr/bin/env python3
"""
map2gaf - Create GO Annotation Format (GAF) file for statistical analysis

Takes a gene/ORF -> GO term mapping file and creates an association file in
GAF 2.0 format, suitable for enrichment tools such as Ontologizer.

Usage:
    map2gaf -i genes_orfs_GOterm_mapping.tsv -s 'Helianthus annuus' -o genes_orfs_GOterm_mapping.gaf

Required arguments:
    -i, --infile    Two column tab-delimited file with the sequence ID in the
                    first column and the GO terms separated by commas in the
                    second column. Further columns are ignored.
    -o, --outfile   GAF file to create.
                    See http://www.geneontology.org/GO.format.gaf-2_0.shtml
    -s, --species   Species name used in the first column of the association
                    file. Give the epithet in quotes.

Options:
    -g, --gofile    GO.terms_alt_ids file with the one letter aspect code for
                    each term. If not given, the latest version is downloaded
                    from --url, used, and removed afterwards.
    --obo           OBO ontology file (e.g. go-basic.obo) to read terms and
                    aspects from instead of GO.terms_alt_ids.
    --url           Download location of GO.terms_alt_ids.
    --strip-terms   Trim whitespace around GO terms in the input before lookup.
                    By default terms must match the reference exactly.
    --keep-gofile   Do not remove a downloaded GO.terms_alt_ids file.
    -v, --verbose   Debug logging.
    -h, --help      Print a usage statement.
    -m, --man       Print the full documentation.

Notes:
    Terms that are obsolete or missing from the reference file are dropped
    silently. Fixed placeholder values are used for the PMID, evidence code
    (ISO), taxon, date and source columns.
"""

import argparse
import logging
import sys

from map2gaf_errors import FileOpenError, RemoteFetchError
from gaf_writer import generate_association
from reference_fetch import DEFAULT_GO_URL, fetch_term_file, reference_file
from term_index import load_obo_index, load_term_index


def setup_logger(verbose=False):
    """Configure logging for the conversion."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )
    return logging.getLogger('map2gaf')


def convert(infile, outfile, species, go_file=None, obo_file=None, url=DEFAULT_GO_URL,
            strip_terms=False, keep_gofile=False, fetch=fetch_term_file):
    """
    Run the whole conversion: load the term index, then write the GAF file.

    Args:
        infile (str): Gene -> GO term mapping file
        outfile (str): GAF file to write
        species (str): Species name
        go_file (str, optional): Local GO.terms_alt_ids file, downloaded if None
        obo_file (str, optional): OBO file, used instead of go_file when given
        url (str): Download location used when no reference file is given
        strip_terms (bool): Trim whitespace around input GO terms
        keep_gofile (bool): Keep a downloaded reference file
        fetch (callable): Called with url to download the reference file

    Returns:
        int: Number of association records written
    """
    if obo_file is not None:
        term_index = load_obo_index(obo_file)
        return generate_association(infile, outfile, species, term_index, strip_terms)

    with reference_file(go_file, url=url, keep=keep_gofile, fetch=fetch) as path:
        term_index = load_term_index(path)
        count = generate_association(infile, outfile, species, term_index, strip_terms)
    return count


def build_parser():
    parser = argparse.ArgumentParser(
        prog='map2gaf',
        description='Generate association file for gene and GO term mappings.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
  map2gaf -i genes_orfs_GOterm_mapping.tsv -s 'Helianthus annuus' -o genes_orfs_GOterm_mapping.gaf
        """
    )

    ## required unless --man, checked in main
    parser.add_argument('-i', '--infile',
                        help='Tab-delimited file containing gene -> GO term mappings '
                             '(GO terms should be separated by commas).')
    parser.add_argument('-o', '--outfile',
                        help='File name for the association file.')
    parser.add_argument('-s', '--species',
                        help='The species name to be used in the association file.')

    parser.add_argument('-g', '--gofile',
                        help='GO.terms_alt_ids file containing the one letter code for each term.')
    parser.add_argument('--obo',
                        help='OBO ontology file to use instead of GO.terms_alt_ids.')
    parser.add_argument('--url', default=DEFAULT_GO_URL,
                        help='Where to download GO.terms_alt_ids from when --gofile is not given.')
    parser.add_argument('--strip-terms', action='store_true',
                        help='Trim whitespace around input GO terms before lookup.')
    parser.add_argument('--keep-gofile', action='store_true',
                        help='Keep the downloaded GO.terms_alt_ids file.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print debug messages.')
    parser.add_argument('-m', '--man', action='store_true',
                        help='Print the full documentation.')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.man:
        print(__doc__)
        return 0

    if not (args.infile and args.outfile and args.species):
        parser.error('Too few arguments.')

    logger = setup_logger(args.verbose)

    try:
        count = convert(args.infile, args.outfile, args.species,
                        go_file=args.gofile, obo_file=args.obo, url=args.url,
                        strip_terms=args.strip_terms, keep_gofile=args.keep_gofile)
    except (FileOpenError, RemoteFetchError) as e:
        logger.error(e)
        return 1

    logger.info(f"Done: {count} associations for {args.species}")
    return 0


if __name__ == '__main__':
    sys.exit(main())

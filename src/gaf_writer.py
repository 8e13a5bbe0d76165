"""
GAF Association Writer

Translates a gene -> GO term mapping file into a GO Annotation Format (GAF 2.0)
association file, one record per (gene, term) pair whose term is present in
the term index.

Input format (tab-delimited, extra columns ignored):
    GENE1   GO:0000001,GO:0000002

Output format:
    !gaf-version: 2.0
    species  db.GENE1  GENE1  0  GO:0000001  PMID:0000000  ISO  0  P  0  0  gene  taxon:79327  23022011  PFAM

The placeholder columns are fixed values that Ontologizer accepts; they are
not configurable.
"""

import logging

from map2gaf_errors import FileOpenError

logger = logging.getLogger(__name__)

GAF_HEADER = '!gaf-version: 2.0'

QUALIFIER = '0'
DB_REFERENCE = 'PMID:0000000'
EVIDENCE_CODE = 'ISO'
WITH_FROM = '0'
DB_OBJECT_NAME = '0'
SYNONYM = '0'
DB_OBJECT_TYPE = 'gene'
TAXON = 'taxon:79327'
DATE = '23022011'
ASSIGNED_BY = 'PFAM'

ENCODING = 'utf-8'


def split_mapping_line(line, strip_terms=False):
    """Return (gene_id, terms) for one line of the mapping file."""
    fields = line.rstrip('\n').split('\t')
    gene_id = fields[0]
    if len(fields) < 2:
        return gene_id, []

    terms = fields[1].split(',')
    if strip_terms:
        terms = [term.strip() for term in terms]
    return gene_id, terms


def format_association(species, gene_id, term, aspect):
    return '\t'.join([
        species, f'db.{gene_id}', gene_id, QUALIFIER, term, DB_REFERENCE,
        EVIDENCE_CODE, WITH_FROM, aspect, DB_OBJECT_NAME, SYNONYM,
        DB_OBJECT_TYPE, TAXON, DATE, ASSIGNED_BY,
    ])


def iter_associations(lines, term_index, species, strip_terms=False):
    """
    Yield formatted GAF records for every mapped term found in the index.

    Input order is kept and duplicate terms give duplicate records. Terms
    missing from the index (unknown or obsolete) are dropped.
    """
    for line in lines:
        gene_id, terms = split_mapping_line(line, strip_terms)
        for term in terms:
            aspect = term_index.get(term)
            if aspect is None:
                continue
            yield format_association(species, gene_id, term, aspect)


def write_gaf(lines, term_index, species, out, strip_terms=False):
    """
    Write the GAF header and all association records to an open handle.

    Args:
        lines (iterable of str): Lines of the gene -> GO term mapping file
        term_index (Mapping): GO ID -> aspect code
        species (str): Species name for the first column
        out (file): Writable text handle
        strip_terms (bool): Trim whitespace around each GO term before lookup

    Returns:
        int: Number of records written (header excluded)
    """
    out.write(GAF_HEADER + '\n')

    count = 0
    for record in iter_associations(lines, term_index, species, strip_terms):
        out.write(record + '\n')
        count += 1
    return count


## non-UTF-8 bytes round-trip; line endings are not translated
def _open(path, mode):
    try:
        return open(path, mode, encoding=ENCODING, errors='surrogateescape', newline='')
    except OSError as e:
        raise FileOpenError(path, e.strerror) from e


def generate_association(infile, outfile, species, term_index, strip_terms=False):
    """
    Create a GAF file from a gene -> GO term mapping file.

    Raises:
        FileOpenError: If the input or output file cannot be opened
    """
    with _open(infile, 'r') as fin, _open(outfile, 'w') as fout:
        count = write_gaf(fin, term_index, species, fout, strip_terms)

    logger.info(f"Wrote {count} associations to {outfile}")
    return count

"""
GO Term Index

This module builds the lookup table used to translate GO terms into GAF
records: a mapping from GO term ID to the one-letter aspect code of its
sub-ontology (P, F or C).

Two reference formats are supported:
    - GO.terms_alt_ids: whitespace-delimited, one term per line, '!' comments.
      The first field is the term ID and the LAST field is the aspect code.
      Obsolete terms carry the code 'obs'.
    - OBO (e.g. go-basic.obo): parsed with goatools, aspect derived from the
      term namespace.

Functions:
    parse_term_lines: Build a term index from lines of a GO.terms_alt_ids file
    load_term_index: Build a term index from a GO.terms_alt_ids file path
    load_obo_index: Build a term index from an OBO file path
"""

import logging
import os
from types import MappingProxyType

from goatools.obo_parser import GODag

from map2gaf_errors import FileOpenError

logger = logging.getLogger(__name__)

OBSOLETE_CODE = 'obs'

NAMESPACE_ASPECTS = {
    'biological_process': 'P',
    'molecular_function': 'F',
    'cellular_component': 'C',
}


def parse_term_lines(lines):
    """
    Parse GO.terms_alt_ids lines into a term -> aspect mapping.

    Only the first and last fields of a line are used, so the number of
    columns in between (alt IDs, multi-word names) does not matter.

    Args:
        lines (iterable of str): Lines of the reference file

    Returns:
        MappingProxyType: Read-only mapping of GO ID (str) to aspect code (str)

    Example:
        >>> index = parse_term_lines([
        ...     '! comment',
        ...     'GO:0000001\\t\\tmitochondrion inheritance\\tP',
        ...     'GO:0000005\\t\\tribosomal chaperone activity\\tF obs',
        ... ])
        >>> dict(index)
        {'GO:0000001': 'P'}
    """
    terms = {}
    for line in lines:
        if line.startswith('!'):
            continue

        fields = line.split()
        if not fields:
            continue

        ## later lines overwrite earlier ones for the same ID
        term_id, aspect = fields[0], fields[-1]
        if aspect == OBSOLETE_CODE:
            continue
        terms[term_id] = aspect

    return MappingProxyType(terms)


def load_term_index(go_file):
    """
    Load a term index from a GO.terms_alt_ids file.

    Args:
        go_file (str): Path to the reference file

    Returns:
        MappingProxyType: Read-only mapping of GO ID to aspect code

    Raises:
        FileOpenError: If the file cannot be opened for reading
    """
    try:
        handle = open(go_file, 'r', encoding='utf-8', errors='surrogateescape')
    except OSError as e:
        raise FileOpenError(go_file, e.strerror) from e

    with handle:
        index = parse_term_lines(handle)

    logger.info(f"Loaded {len(index)} GO terms from {go_file}")
    return index


def load_obo_index(obo_file):
    """
    Load a term index from an OBO ontology file using goatools.

    Obsolete terms are left out by GODag itself. Alternate IDs are not
    indexed, only the primary ID of each term.

    Args:
        obo_file (str): Path to OBO file (e.g. go-basic.obo)

    Returns:
        MappingProxyType: Read-only mapping of GO ID to aspect code

    Raises:
        FileOpenError: If the file cannot be read
    """
    ## GODag raises a bare Exception for missing files
    if not os.path.isfile(obo_file):
        raise FileOpenError(obo_file, 'No such file')
    godag = GODag(obo_file, prt=None)

    terms = {}
    for go_id, term in godag.items():
        # GODag also keys each record under its alt_ids
        if go_id != term.item_id:
            continue
        aspect = NAMESPACE_ASPECTS.get(term.namespace)
        if aspect is None:
            logger.debug(f"Skipping {go_id}: unknown namespace {term.namespace}")
            continue
        terms[go_id] = aspect

    logger.info(f"Loaded {len(terms)} GO terms from {obo_file}")
    return MappingProxyType(terms)

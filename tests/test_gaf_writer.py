import io

import pytest

from map2gaf_errors import FileOpenError
from gaf_writer import (GAF_HEADER, format_association, generate_association,
                        iter_associations, split_mapping_line, write_gaf)
from term_index import parse_term_lines

REFERENCE = [
    '! comment',
    'GO:0001 some process P',
    'GO:0002 old term obs',
    'GO:0004 some function F',
    'GO:0005 some component C',
]

EXPECTED_GENE1 = ('Test species\tdb.GENE1\tGENE1\t0\tGO:0001\tPMID:0000000\tISO\t0\tP'
                  '\t0\t0\tgene\ttaxon:79327\t23022011\tPFAM')


@pytest.fixture
def term_index():
    return parse_term_lines(REFERENCE)


def run(lines, term_index, species='Test species', strip_terms=False):
    out = io.StringIO()
    count = write_gaf(lines, term_index, species, out, strip_terms)
    return count, out.getvalue().splitlines()


def test_split_mapping_line():
    assert split_mapping_line('GENE1\tGO:0001,GO:0002\textra\n') == ('GENE1', ['GO:0001', 'GO:0002'])


def test_split_mapping_line_without_tab():
    assert split_mapping_line('GENE1\n') == ('GENE1', [])


def test_split_mapping_line_keeps_whitespace():
    assert split_mapping_line('GENE1\tGO:0001, GO:0004\n') == ('GENE1', ['GO:0001', ' GO:0004'])
    assert split_mapping_line('GENE1\tGO:0001, GO:0004\n', strip_terms=True) == ('GENE1', ['GO:0001', 'GO:0004'])


def test_format_association():
    assert format_association('Test species', 'GENE1', 'GO:0001', 'P') == EXPECTED_GENE1
    assert len(EXPECTED_GENE1.split('\t')) == 15


def test_obsolete_and_unknown_terms_dropped(term_index):
    count, lines = run(['GENE1\tGO:0001,GO:0002,GO:0003\n'], term_index)
    assert lines == [GAF_HEADER, EXPECTED_GENE1]
    assert count == 1


def test_columns_for_indexed_terms(term_index):
    _, lines = run(['ORF7\tGO:0004,GO:0005\n'], term_index)
    rows = [line.split('\t') for line in lines[1:]]
    assert [(r[1], r[2], r[4], r[8]) for r in rows] == [
        ('db.ORF7', 'ORF7', 'GO:0004', 'F'),
        ('db.ORF7', 'ORF7', 'GO:0005', 'C'),
    ]


def test_duplicates_are_kept(term_index):
    count, lines = run(['GENE1\tGO:0001,GO:0004\n', 'GENE1\tGO:0004,GO:0001,GO:0001\n'], term_index)
    terms = [line.split('\t')[4] for line in lines[1:]]
    assert terms == ['GO:0001', 'GO:0004', 'GO:0004', 'GO:0001', 'GO:0001']
    assert count == 5


def test_line_without_tab_gives_no_rows(term_index):
    count, lines = run(['GENE1\n', '\n', 'GENE2\tGO:0001\n'], term_index)
    assert count == 1
    assert lines[1].split('\t')[2] == 'GENE2'


def test_header_on_empty_input(term_index):
    count, lines = run([], term_index)
    assert lines == [GAF_HEADER]
    assert count == 0


def test_whitespace_is_strict_by_default(term_index):
    count, _ = run(['GENE1\tGO:0001, GO:0004 \n'], term_index)
    assert count == 1

    count, lines = run(['GENE1\tGO:0001, GO:0004 \n'], term_index, strip_terms=True)
    assert count == 2
    assert lines[2].split('\t')[4] == 'GO:0004'


def test_iter_associations_is_lazy(term_index):
    records = iter_associations(iter(['GENE1\tGO:0001\n']), term_index, 'sp')
    assert next(records).startswith('sp\tdb.GENE1\t')
    with pytest.raises(StopIteration):
        next(records)


def test_generate_association(tmp_path, term_index):
    infile = tmp_path / 'mapping.tsv'
    infile.write_text('GENE1\tGO:0001,GO:0002,GO:0003\n')
    outfile = tmp_path / 'out.gaf'

    count = generate_association(str(infile), str(outfile), 'Test species', term_index)

    assert count == 1
    assert outfile.read_text() == f'{GAF_HEADER}\n{EXPECTED_GENE1}\n'


def test_generate_association_is_idempotent(tmp_path, term_index):
    infile = tmp_path / 'mapping.tsv'
    infile.write_text('GENE1\tGO:0001,GO:0004\nGENE2\tGO:0005\tnote\n')
    first, second = tmp_path / 'a.gaf', tmp_path / 'b.gaf'

    generate_association(str(infile), str(first), 'Helianthus annuus', term_index)
    generate_association(str(infile), str(second), 'Helianthus annuus', term_index)

    assert first.read_bytes() == second.read_bytes()


def test_generate_association_missing_input(tmp_path, term_index):
    outfile = tmp_path / 'out.gaf'
    with pytest.raises(FileOpenError):
        generate_association(str(tmp_path / 'missing.tsv'), str(outfile), 'sp', term_index)
    assert not outfile.exists()


def test_generate_association_unwritable_output(tmp_path, term_index):
    infile = tmp_path / 'mapping.tsv'
    infile.write_text('GENE1\tGO:0001\n')
    with pytest.raises(FileOpenError):
        generate_association(str(infile), str(tmp_path / 'no' / 'such' / 'dir.gaf'), 'sp', term_index)


def test_generate_association_keeps_carriage_returns(tmp_path, term_index):
    infile = tmp_path / 'mapping.tsv'
    infile.write_bytes(b'GENE1\tGO:0004,GO:0001\r\nGENE2\tGO:0005\r\n')
    outfile = tmp_path / 'out.gaf'

    count = generate_association(str(infile), str(outfile), 'sp', term_index)

    ## the last term of each line keeps its '\r' and misses the index
    assert count == 1
    rows = outfile.read_bytes().split(b'\n')
    assert rows[1].split(b'\t')[4] == b'GO:0004'
    assert rows[2] == b''


def test_generate_association_passes_non_utf8_bytes(tmp_path, term_index):
    infile = tmp_path / 'mapping.tsv'
    infile.write_bytes(b'G\xe9NE1\tGO:0001\n')
    outfile = tmp_path / 'out.gaf'

    count = generate_association(str(infile), str(outfile), 'sp', term_index)

    assert count == 1
    columns = outfile.read_bytes().splitlines()[1].split(b'\t')
    assert columns[1] == b'db.G\xe9NE1'
    assert columns[2] == b'G\xe9NE1'

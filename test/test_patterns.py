"""
Tests for routine pattern parsing and matching
"""

import io

import pytest

from dispatch_gen import (
    PatternError, PatternList, RoutinePattern, load_patterns, parse_pattern_lines,
)


class TestRoutinePattern:
    """Test single pattern parsing and matching."""

    def test_parse_lowercase_wildcard(self):
        """* stands for s/d at its position."""
        p = RoutinePattern.parse('cblas_*gemm')
        assert p.position == 6
        assert (p.single_marker, p.double_marker) == ('s', 'd')
        assert p.dispatch_name == 'cblas_gemm'

    def test_parse_uppercase_wildcard(self):
        """# stands for S/D."""
        p = RoutinePattern.parse('LAPACKE_#potrf')
        assert (p.single_marker, p.double_marker) == ('S', 'D')

    def test_missing_wildcard_rejected(self):
        """A pattern without a marker is invalid."""
        with pytest.raises(PatternError):
            RoutinePattern.parse('cblas_sgemm')

    def test_two_wildcards_rejected(self):
        """Only one precision marker can be resolved per name."""
        with pytest.raises(PatternError):
            RoutinePattern.parse('cblas_*ge*')

    def test_match_single_and_double(self):
        """s maps to 32-bit, d to 64-bit, both to the same dispatch name."""
        p = RoutinePattern.parse('cblas_*gemm')
        m32 = p.match('cblas_sgemm')
        m64 = p.match('cblas_dgemm')
        assert m32.is32 and not m32.is64
        assert m64.is64 and not m64.is32
        assert m32.dispatch_name == m64.dispatch_name == 'cblas_gemm'

    def test_uppercase_convention(self):
        """S/D names resolve only through a # pattern."""
        p = RoutinePattern.parse('LAPACKE_#potrf')
        assert p.match('LAPACKE_Spotrf').is32
        assert p.match('LAPACKE_Dpotrf').is64
        assert p.match('LAPACKE_Dpotrf').dispatch_name == 'LAPACKE_potrf'
        assert p.match('LAPACKE_spotrf') is None

    def test_exact_reconstruction_only(self):
        """No substring, prefix or other-marker matches."""
        p = RoutinePattern.parse('cblas_*gemm')
        for name in ['cblas_cgemm', 'cblas_zgemm', 'cblas_gemm', 'cblas_sgemm_batch',
                     'xcblas_sgemm', 'cblas_Sgemm']:
            assert p.match(name) is None

    def test_marker_removed_at_wildcard_position(self):
        """The dispatch name drops exactly the marker character."""
        p = RoutinePattern.parse('v*Mul')
        assert p.match('vsMul').dispatch_name == 'vMul'
        p = RoutinePattern.parse('*dot')
        assert p.match('ddot').dispatch_name == 'dot'

    def test_match_iff_expansion(self):
        """A name matches exactly when it equals an expansion of the pattern."""
        for text in ['cblas_*gemm', 'LAPACKE_#trtrs', 'v*RngGaussian', '*axpy']:
            p = RoutinePattern.parse(text)
            for marker in (p.single_marker, p.double_marker):
                name = p.expand(marker)
                m = p.match(name)
                assert m is not None
                assert m.dispatch_name == name[:p.position] + name[p.position + 1:]
                assert m.is_single == (marker == p.single_marker)


class TestPatternList:
    """Test ordered pattern lists."""

    def test_no_match_returns_none(self):
        """Irrelevant names are not an error."""
        patterns = PatternList.from_strings(['cblas_*gemm'])
        assert patterns.match('mkl_get_max_threads') is None

    def test_first_pattern_wins(self):
        """Pattern order decides which dispatch name an overlapping name gets."""
        patterns = PatternList.from_strings(['*dot', 's*ot'])
        m = patterns.match('sdot')
        assert m.dispatch_name == 'dot'
        assert m.is32

        patterns = PatternList.from_strings(['s*ot', '*dot'])
        m = patterns.match('sdot')
        assert m.dispatch_name == 'sot'
        assert m.is64

    def test_texts_keep_input_order(self):
        texts = ['v*Mul', 'cblas_*gemm', 'LAPACKE_#potrf']
        assert PatternList.from_strings(texts).texts == texts

    def test_duplicate_pattern_dropped(self):
        """A repeated line is harmless and kept once at its first position."""
        patterns = PatternList.from_strings(['cblas_*gemm', 'v*Mul', 'cblas_*gemm'])
        assert patterns.texts == ['cblas_*gemm', 'v*Mul']
        assert len(patterns) == 2

    def test_duplicate_line_in_file(self):
        patterns = parse_pattern_lines(['cblas_*dot', 'cblas_*dot', 'LAPACKE_#potrf'])
        assert patterns.texts == ['cblas_*dot', 'LAPACKE_#potrf']


class TestLoadPatterns:
    """Test reading the desired-function list."""

    def test_blank_lines_and_comments_ignored(self):
        """Only pattern lines are kept, stripped of whitespace."""
        patterns = parse_pattern_lines([
            'cblas_*gemm',
            '',
            '   ',
            '// solvers',
            '  LAPACKE_*potrs  ',
        ])
        assert patterns.texts == ['cblas_*gemm', 'LAPACKE_*potrs']

    def test_invalid_line_reports_line_number(self):
        with pytest.raises(PatternError, match='line 3'):
            parse_pattern_lines(['cblas_*gemm', '', 'cblas_sgemv'])

    def test_load_from_file(self, tmp_path):
        path = tmp_path / 'funcs.txt'
        path.write_text('v*Mul\ncblas_*syrk\n')
        assert load_patterns(str(path)).texts == ['v*Mul', 'cblas_*syrk']

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(PatternError):
            load_patterns(str(tmp_path / 'missing.txt'))

    def test_load_from_stdin(self, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.StringIO('cblas_*swap\n\nv*RngGaussian\n'))
        assert load_patterns('-').texts == ['cblas_*swap', 'v*RngGaussian']

"""
Tests for meeting code generation.
"""

import random

import pytest

from meetsync.domain.code_generator import CODE_ALPHABET, CodeGenerator


class TestCodeGenerator:
    """Tests for CodeGenerator."""

    def test_default_code_shape(self):
        """Test codes are six uppercase base-36 characters."""
        code = CodeGenerator().next()

        assert len(code) == 6
        assert code == code.upper()
        assert all(ch in CODE_ALPHABET for ch in code)

    def test_custom_length(self):
        """Test the length is configurable."""
        assert len(CodeGenerator(length=9).next()) == 9

    def test_codes_vary_between_calls(self):
        """Test consecutive codes are not all the same."""
        generator = CodeGenerator()

        codes = {generator.next() for _ in range(50)}

        assert len(codes) > 1

    def test_injected_rng_is_used(self):
        """Test a seeded source makes generation reproducible."""
        first = CodeGenerator(rng=random.Random(7))
        second = CodeGenerator(rng=random.Random(7))

        assert [first.next() for _ in range(3)] == [second.next() for _ in range(3)]

    def test_non_positive_length_rejected(self):
        """Test a zero-length code is refused."""
        with pytest.raises(ValueError):
            CodeGenerator(length=0)

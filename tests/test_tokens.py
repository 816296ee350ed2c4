"""Session token generation tests."""

import string

import pytest

from delphi_db import tokens
from delphi_db.tokens import DEFAULT_TOKEN_LENGTH, generate_token
from delphi_estimation.errors import InvalidParameterError, RandomSourceError


class TestGenerateToken:

    def test_default_length(self):
        assert len(generate_token()) == DEFAULT_TOKEN_LENGTH == 32

    @pytest.mark.parametrize("length", [1, 7, 20, 64])
    def test_exact_length(self, length):
        assert len(generate_token(length)) == length

    def test_hex_only(self):
        assert set(generate_token()) <= set(string.hexdigits.lower())

    def test_tokens_differ(self):
        assert len({generate_token() for _ in range(50)}) == 50

    @pytest.mark.parametrize("length", [0, -1])
    def test_non_positive_length_rejected(self, length):
        with pytest.raises(InvalidParameterError, match="Invalid token length"):
            generate_token(length)

    def test_random_source_failure(self, monkeypatch):
        def _fail(n):
            raise OSError("no entropy")

        monkeypatch.setattr(tokens.secrets, "token_bytes", _fail)
        with pytest.raises(RandomSourceError) as exc_info:
            generate_token()
        assert isinstance(exc_info.value.__cause__, OSError)

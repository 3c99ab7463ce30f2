"""
Substitution Codec for Device Log Lines

This module implements the symbol/token substitution the device uses to
obscure its log content. Each plaintext symbol maps to a short opaque token;
characters outside the alphabet (delimiters, spaces, slashes) are written
verbatim, so an encoded line keeps its comma structure.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple
from . import constants


ALPHABET: Tuple[str, ...] = tuple("0123456789.-ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")

DEVICE_TOKENS: Tuple[str, ...] = (
    "Dm", "An", "fo", "Up", "nq", "1r", ".s", "ot", "uC", "Nv",
    "0Q", "F1", "2u", "3k", "4M", "O5", "d6", "7P", "8y", "x9",
    "0S", "JT", "UR", "iV", "zW", "KX", "YI", "Zw", "aL", "Xb",
    "T.", "-V", "A4", "B6", "Ch", "vD", "jE", "F9", "G8", "gH",
    "Yc", "bd", "Be", "fG", "gH", "ah", "Zi", "jE", "kl", "lt",
    "pI", "Jq", "K5", "LW", "M7", "N3", "O2", "mP", "eQ", "SR",
    "ws", "xr", "yc", "z-",
)


@dataclass(frozen=True)
class Codec:
    """
    Immutable pair of parallel symbol/token tables.

    Decoding is greedy longest-match: at each position every configured token
    length is tried from longest to shortest, and an unmatched character is
    copied through unchanged. When a token appears more than once in the
    table, the symbol with the highest index wins on decode.

    Attributes:
        alphabet: Plaintext symbols, one character each.
        tokens: Token for the symbol at the same index.
        token_lengths: Match lengths to try. Lengths with no token in the
                       table simply never match.
    """
    alphabet: Tuple[str, ...] = ALPHABET
    tokens: Tuple[str, ...] = DEVICE_TOKENS
    token_lengths: Tuple[int, ...] = constants.TOKEN_LENGTHS
    _encode_map: Dict[str, str] = field(init=False, repr=False, compare=False)
    _decode_map: Dict[str, str] = field(init=False, repr=False, compare=False)
    _lengths: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.alphabet) != len(self.tokens):
            raise ValueError(
                f"Alphabet has {len(self.alphabet)} symbols but token table has {len(self.tokens)} entries"
            )
        if any(length < 1 for length in self.token_lengths):
            raise ValueError(f"Token lengths must be positive: {self.token_lengths}")

        encode_map = {}
        for symbol, token in zip(self.alphabet, self.tokens):
            encode_map.setdefault(symbol, token)
        decode_map = dict(zip(self.tokens, self.alphabet))

        object.__setattr__(self, "_encode_map", encode_map)
        object.__setattr__(self, "_decode_map", decode_map)
        object.__setattr__(self, "_lengths", tuple(sorted(set(self.token_lengths), reverse=True)))

    @property
    def collisions(self) -> Dict[str, List[str]]:
        """Tokens shared by several symbols, mapped to those symbols in table order."""
        seen: Dict[str, List[str]] = {}
        for symbol, token in zip(self.alphabet, self.tokens):
            seen.setdefault(token, []).append(symbol)
        return {token: symbols for token, symbols in seen.items() if len(symbols) > 1}

    def decode(self, line: str) -> str:
        """
        Decode an encoded line.

        Args:
            line: Encoded text.

        Returns:
            Plaintext, with unmatched characters passed through.
        """
        out = []
        i = 0
        n = len(line)
        decode_map = self._decode_map

        while i < n:
            for length in self._lengths:
                if i + length > n:
                    continue
                symbol = decode_map.get(line[i:i + length])
                if symbol is not None:
                    out.append(symbol)
                    i += length
                    break
            else:
                out.append(line[i])
                i += 1

        return "".join(out)

    def encode(self, line: str) -> str:
        """Encode a plaintext line; characters outside the alphabet are kept."""
        encode_map = self._encode_map
        return "".join(encode_map.get(char, char) for char in line)


DEFAULT_CODEC = Codec()


def decode_text(line: str, codec: Codec = DEFAULT_CODEC) -> str:
    return codec.decode(line)


def encode_text(line: str, codec: Codec = DEFAULT_CODEC) -> str:
    return codec.encode(line)


def build_codec(alphabet: Sequence[str], tokens: Sequence[str],
                token_lengths: Sequence[int] = constants.TOKEN_LENGTHS) -> Codec:
    """Build a codec from arbitrary tables, e.g. for another firmware revision."""
    return Codec(tuple(alphabet), tuple(tokens), tuple(token_lengths))

import unittest

from mareelog.codec import ALPHABET, DEVICE_TOKENS, DEFAULT_CODEC, Codec, build_codec, decode_text, encode_text


class CodecTests(unittest.TestCase):
    def test_tables_are_parallel(self):
        self.assertEqual(len(ALPHABET), len(DEVICE_TOKENS))
        self.assertTrue(all(len(token) == 2 for token in DEVICE_TOKENS))

    def test_device_table_collisions(self):
        self.assertEqual(DEFAULT_CODEC.collisions, {"gH": ["b", "g"], "jE": ["Y", "j"]})

    def test_round_trip_every_unambiguous_symbol(self):
        shadowed = {"b", "Y"}
        for symbol in ALPHABET:
            if symbol in shadowed:
                continue
            self.assertEqual(DEFAULT_CODEC.decode(DEFAULT_CODEC.encode(symbol)), symbol)

    def test_shadowed_symbols_decode_to_later_index(self):
        self.assertEqual(DEFAULT_CODEC.encode("b"), "gH")
        self.assertEqual(DEFAULT_CODEC.decode("gH"), "g")
        self.assertEqual(DEFAULT_CODEC.encode("Y"), "jE")
        self.assertEqual(DEFAULT_CODEC.decode("jE"), "j")

    def test_round_trip_plaintext_line(self):
        line = "SavingID,Date,Time of Day,Cale 1,Latitude,Longitude"
        self.assertEqual(decode_text(encode_text(line)), line)

    def test_round_trip_with_unambiguous_table(self):
        tokens = tuple(f"{i:02d}" for i in range(len(ALPHABET)))
        codec = build_codec(ALPHABET, tokens, token_lengths=(2,))
        self.assertEqual(codec.collisions, {})
        text = "".join(ALPHABET)
        self.assertEqual(codec.decode(codec.encode(text)), text)

    def test_known_encodings(self):
        self.assertEqual(encode_text("12"), "Anfo")
        self.assertEqual(encode_text("0.5"), "Dm0Q1r")
        self.assertEqual(decode_text("Dm0Q1r"), "0.5")
        self.assertEqual(decode_text("0S"), "I")

    def test_passthrough_characters(self):
        for char in [",", " ", "/", ":", "\t", "é"]:
            self.assertEqual(encode_text(char), char)
            self.assertEqual(decode_text(char), char)

    def test_empty_input(self):
        self.assertEqual(decode_text(""), "")
        self.assertEqual(encode_text(""), "")

    def test_token_line_decodes_fully(self):
        encoded = encode_text("SavingID")
        decoded = decode_text(encoded)
        self.assertEqual(decoded, "SavingID")
        self.assertTrue(all(char in ALPHABET for char in decoded))

    def test_unmatched_characters_pass_through(self):
        # "Dm" is a token, "Q" alone and "!" are not
        self.assertEqual(decode_text("DmQ!"), "0Q!")

    def test_chunking_on_token_boundary(self):
        a, b = encode_text("12"), encode_text("34")
        self.assertEqual(decode_text(a + b), decode_text(a) + decode_text(b))

    def test_chunking_inside_a_token(self):
        encoded = encode_text("0")
        self.assertEqual(decode_text(encoded), "0")
        self.assertEqual(decode_text(encoded[:1]) + decode_text(encoded[1:]), "Dm")

    def test_longest_token_wins(self):
        codec = Codec(alphabet=("a", "b"), tokens=("xyz", "xy"))
        self.assertEqual(codec.decode("xyz"), "a")
        self.assertEqual(codec.decode("xyq"), "bq")
        self.assertEqual(codec.decode("xyzxy"), "ab")

    def test_token_lengths_are_configuration(self):
        codec = Codec(alphabet=("a", "b"), tokens=("xyz", "xy"), token_lengths=(2,))
        self.assertEqual(codec.decode("xyz"), "bz")

    def test_mismatched_tables_rejected(self):
        with self.assertRaises(ValueError):
            Codec(alphabet=("a", "b"), tokens=("xy",))

    def test_non_positive_token_length_rejected(self):
        with self.assertRaises(ValueError):
            Codec(alphabet=("a",), tokens=("xy",), token_lengths=(0,))

    def test_codec_is_immutable(self):
        with self.assertRaises(AttributeError):
            DEFAULT_CODEC.tokens = ()


if __name__ == "__main__":
    unittest.main()

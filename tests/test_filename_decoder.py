import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

from attachment_extractor.core.filename_decoder import (
    decode_encoded_words,
    decode_header_bytes,
    percent_decode,
    resolve_filename,
)


def test_quoted_filename():
    assert resolve_filename('attachment; filename="report.pdf"', "application/pdf") == "report.pdf"


def test_quoted_filename_with_spaces():
    assert resolve_filename('attachment; filename="Q3 report.pdf"', "") == "Q3 report.pdf"


def test_bare_filename():
    assert resolve_filename("attachment; filename=report.pdf; size=12", "") == "report.pdf"


def test_rfc2231_extended_value():
    disposition = "attachment; filename*=UTF-8''R%C3%A9sum%C3%A9.pdf"
    assert resolve_filename(disposition, "") == "Résumé.pdf"


def test_rfc2231_with_language_tag():
    disposition = "attachment; filename*=iso-8859-1'de'Gr%FC%DFe.txt"
    assert resolve_filename(disposition, "") == "Grüße.txt"


def test_extended_value_preferred_over_plain():
    disposition = "attachment; filename=\"fallback.pdf\"; filename*=UTF-8''real.pdf"
    assert resolve_filename(disposition, "") == "real.pdf"


def test_content_type_name_fallback():
    assert resolve_filename("attachment", 'application/pdf; name="invoice.pdf"') == "invoice.pdf"
    assert resolve_filename("", "application/pdf; name=invoice.pdf") == "invoice.pdf"


def test_disposition_wins_over_content_type():
    assert resolve_filename('attachment; filename="a.pdf"', 'application/pdf; name="b.pdf"') == "a.pdf"


def test_name_pattern_does_not_match_filename_parameter():
    assert resolve_filename("inline", 'application/pdf; filename="a.pdf"') is None


def test_empty_quoted_filename_falls_through():
    assert resolve_filename('attachment; filename=""', 'application/pdf; name="b.pdf"') == "b.pdf"


def test_no_filename_anywhere():
    assert resolve_filename("attachment", "application/pdf") is None
    assert resolve_filename("", "") is None


def test_q_encoded_utf8_filename():
    disposition = 'attachment; filename="=?UTF-8?Q?Rechnung_M=C3=A4rz.pdf?="'
    assert resolve_filename(disposition, "") == "Rechnung März.pdf"


def test_q_encoded_latin1_filename():
    assert decode_encoded_words("=?iso-8859-1?Q?Gr=FC=DFe.txt?=") == "Grüße.txt"


def test_adjacent_q_words_are_joined():
    value = "=?UTF-8?Q?Jahres?= =?UTF-8?Q?bericht.pdf?="
    assert decode_encoded_words(value) == "Jahresbericht.pdf"


def test_text_around_encoded_word_is_kept():
    assert decode_encoded_words("copy of =?UTF-8?Q?M=C3=A4rz?=.pdf") == "copy of März.pdf"


def test_b_encoded_word_is_left_verbatim():
    value = "=?UTF-8?B?UmVjaG51bmcucGRm?="
    assert decode_encoded_words(value) == value


def test_plain_value_unchanged():
    assert decode_encoded_words("plain.txt") == "plain.txt"


def test_percent_decode():
    assert percent_decode("Q3%20report.pdf") == "Q3 report.pdf"
    assert percent_decode("no-escapes.pdf") == "no-escapes.pdf"


def test_percent_decode_leaves_invalid_sequences():
    assert percent_decode("100%.pdf") == "100%.pdf"
    assert percent_decode("%FF.pdf") == "%FF.pdf"


def test_percent_decode_unknown_charset_uses_utf8():
    assert percent_decode("a%20b", "x-no-such-charset") == "a b"


def test_decode_header_bytes_declared_charset():
    assert decode_header_bytes("März".encode("utf-8"), "utf-8") == "März"
    assert decode_header_bytes(b"M\xe4rz", "iso-8859-1") == "März"


def test_decode_header_bytes_unknown_charset_ascii():
    assert decode_header_bytes(b"report.pdf", "x-no-such-charset") == "report.pdf"

"""Character reference resolution into the single-byte Mac OS Roman target set"""

import logging
import re
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)

REPLACEMENT_BYTE = 0x3F    # '?'

_DECIMAL_RE = re.compile(r'^[0-9]+$')
_HEX_RE = re.compile(r'^[0-9a-fA-F]+$')


@dataclass(frozen=True)
class Entity:
    """One reference name with its target byte and Unicode code point."""
    name: str
    char: int
    unicode: int


# Order matters: the first entry wins when several share a code point.
_TABLE = (
    ("&Tab;", 0x09, 0x09),
    ("&NewLine;", 0x0D, 0x0A),
    ("&excl;", 0x21, 0x21),
    ("&quot;", 0x22, 0x22),
    ("&QUOT;", 0x22, 0x22),
    ("&num;", 0x23, 0x23),
    ("&dollar;", 0x24, 0x24),
    ("&percnt;", 0x25, 0x25),
    ("&amp;", 0x26, 0x26),
    ("&apos;", 0x27, 0x27),
    ("&lpar;", 0x28, 0x28),
    ("&rpar;", 0x29, 0x29),
    ("&ast;", 0x2A, 0x2A),
    ("&midast;", 0x2A, 0x2A),
    ("&plus;", 0x2B, 0x2B),
    ("&comma;", 0x2C, 0x2C),
    ("&period;", 0x2E, 0x2E),
    ("&sol;", 0x2F, 0x2F),
    ("&colon;", 0x3A, 0x3A),
    ("&semi;", 0x3B, 0x3B),
    ("&lt;", 0x3C, 0x3C),
    ("&LT;", 0x3C, 0x3C),
    ("&equals;", 0x3D, 0x3D),
    ("&gt;", 0x3E, 0x3E),
    ("&GT;", 0x3E, 0x3E),
    ("&quest;", 0x3F, 0x3F),
    ("&commat;", 0x40, 0x40),
    ("&lsqb;", 0x5B, 0x5B),
    ("&lbrack;", 0x5B, 0x5B),
    ("&bsol;", 0x5C, 0x5C),
    ("&rsqb;", 0x5D, 0x5D),
    ("&rbrack;", 0x5D, 0x5D),
    ("&Hat;", 0x5E, 0x5E),
    ("&lowbar;", 0x5F, 0x5F),
    ("&grave;", 0x60, 0x60),
    ("&DiacriticalGrave;", 0x60, 0x60),
    ("&lcub;", 0x7B, 0x7B),
    ("&lbrace;", 0x7B, 0x7B),
    ("&verbar;", 0x7C, 0x7C),
    ("&vert;", 0x7C, 0x7C),
    ("&VerticalLine;", 0x7C, 0x7C),
    ("&rcub;", 0x7D, 0x7D),
    ("&rbrace;", 0x7D, 0x7D),
    ("&nbsp;", 0xCA, 0xA0),
    ("&NonBreakingSpace;", 0xCA, 0xA0),
    ("&iexcl;", 0xC1, 0xA1),
    ("&cent;", 0xA2, 0xA2),
    ("&pound;", 0xA3, 0xA3),
    ("&curren;", 0xDB, 0xA4),
    ("&yen;", 0xB4, 0xA5),
    ("&sect;", 0xA4, 0xA7),
    ("&Dot;", 0xAC, 0xA8),
    ("&die;", 0xAC, 0xA8),
    ("&DoubleDot;", 0xAC, 0xA8),
    ("&uml;", 0xAC, 0xA8),
    ("&copy;", 0xA9, 0xA9),
    ("&COPY;", 0xA9, 0xA9),
    ("&ordf;", 0xBB, 0xAA),
    ("&laquo;", 0xC7, 0xAB),
    ("&not;", 0xC2, 0xAC),
    ("&reg;", 0xA8, 0xAE),
    ("&circleR;", 0xA8, 0xAE),
    ("&REG;", 0xA8, 0xAE),
    ("&macr;", 0xF8, 0xAF),
    ("&OverBar;", 0xF8, 0xAF),
    ("&strns;", 0xF8, 0xAF),
    ("&deg;", 0xA1, 0xB0),
    ("&plusmn;", 0xB1, 0xB1),
    ("&pm;", 0xB1, 0xB1),
    ("&PlusMinus;", 0xB1, 0xB1),
    ("&acute;", 0xAB, 0xB4),
    ("&DiacriticalAcute;", 0xAB, 0xB4),
    ("&micro;", 0xB5, 0xB5),
    ("&para;", 0xA6, 0xB6),
    ("&middot;", 0xE1, 0xB7),
    ("&centerdot;", 0xE1, 0xB7),
    ("&CenterDot;", 0xE1, 0xB7),
    ("&cedil;", 0xFC, 0xB8),
    ("&Cedilla;", 0xFC, 0xB8),
    ("&ordm;", 0xBC, 0xBA),
    ("&raquo;", 0xC8, 0xBB),
    ("&iquest;", 0xC0, 0xBF),
    ("&Agrave;", 0xCB, 0xC0),
    ("&Aacute;", 0xE7, 0xC1),
    ("&Acirc;", 0xE5, 0xC2),
    ("&Atilde;", 0xCC, 0xC3),
    ("&Auml;", 0x80, 0xC4),
    ("&Aring;", 0x81, 0xC5),
    ("&AElig;", 0xAE, 0xC6),
    ("&Ccedil;", 0x82, 0xC7),
    ("&Egrave;", 0xE9, 0xC8),
    ("&Eacute;", 0x83, 0xC9),
    ("&Ecirc;", 0xE6, 0xCA),
    ("&Euml;", 0xE8, 0xCB),
    ("&Igrave;", 0xED, 0xCC),
    ("&Iacute;", 0xEA, 0xCD),
    ("&Icirc;", 0xEB, 0xCE),
    ("&Iuml;", 0xEC, 0xCF),
    ("&Ntilde;", 0x84, 0xD1),
    ("&Ograve;", 0xF1, 0xD2),
    ("&Oacute;", 0xEE, 0xD3),
    ("&Ocirc;", 0xEF, 0xD4),
    ("&Otilde;", 0xCD, 0xD5),
    ("&Ouml;", 0x85, 0xD6),
    ("&Oslash;", 0xAF, 0xD8),
    ("&Ugrave;", 0xF4, 0xD9),
    ("&Uacute;", 0xF2, 0xDA),
    ("&Ucirc;", 0xF3, 0xDB),
    ("&Uuml;", 0x86, 0xDC),
    ("&szlig;", 0xA7, 0xDF),
    ("&agrave;", 0x88, 0xE0),
    ("&aacute;", 0x87, 0xE1),
    ("&acirc;", 0x89, 0xE2),
    ("&atilde;", 0x8B, 0xE3),
    ("&auml;", 0x8A, 0xE4),
    ("&aring;", 0x8C, 0xE5),
    ("&aelig;", 0xBE, 0xE6),
    ("&ccedil;", 0x8D, 0xE7),
    ("&egrave;", 0x8F, 0xE8),
    ("&eacute;", 0x8E, 0xE9),
    ("&ecirc;", 0x90, 0xEA),
    ("&euml;", 0x91, 0xEB),
    ("&igrave;", 0x93, 0xEC),
    ("&iacute;", 0x92, 0xED),
    ("&icirc;", 0x94, 0xEE),
    ("&iuml;", 0x95, 0xEF),
    ("&ntilde;", 0x96, 0xF1),
    ("&ograve;", 0x98, 0xF2),
    ("&oacute;", 0x97, 0xF3),
    ("&ocirc;", 0x99, 0xF4),
    ("&otilde;", 0x9B, 0xF5),
    ("&ouml;", 0x9A, 0xF6),
    ("&divide;", 0xD6, 0xF7),
    ("&div;", 0xD6, 0xF7),
    ("&oslash;", 0xBF, 0xF8),
    ("&ugrave;", 0x9D, 0xF9),
    ("&uacute;", 0x9C, 0xFA),
    ("&ucirc;", 0x9E, 0xFB),
    ("&uuml;", 0x9F, 0xFC),
    ("&yuml;", 0xD8, 0xFF),
    ("&dagger;", 0xA0, 0x2020),
    ("&bull;", 0xA5, 0x2022),
    ("&bullet;", 0xA5, 0x2022),
    ("&trade;", 0xAA, 0x2122),
    ("&TRADE;", 0xAA, 0x2122),
    ("&ne;", 0xAD, 0x2260),
    ("&NotEqual;", 0xAD, 0x2260),
    ("&infin;", 0xB0, 0x221E),
    ("&le;", 0xB2, 0x2264),
    ("&leq;", 0xB2, 0x2264),
    ("&LessEqual;", 0xB2, 0x2264),
    ("&ge;", 0xB3, 0x2265),
    ("&geq;", 0xB3, 0x2265),
    ("&GreaterEqual;", 0xB3, 0x2265),
    ("&part;", 0xB6, 0x2202),
    ("&PartialD;", 0xB6, 0x2202),
    ("&sum;", 0xB7, 0x2211),
    ("&Sum;", 0xB7, 0x2211),
    ("&prod;", 0xB8, 0x220F),
    ("&Product;", 0xB8, 0x220F),
    ("&pi;", 0xB9, 0x3C0),
    ("&int;", 0xBA, 0x222B),
    ("&Integral;", 0xBA, 0x222B),
    ("&Omega;", 0xBD, 0x3A9),
    ("&radic;", 0xC3, 0x221A),
    ("&Sqrt;", 0xC3, 0x221A),
    ("&fnof;", 0xC4, 0x192),
    ("&asymp;", 0xC5, 0x2248),
    ("&ap;", 0xC5, 0x2248),
    ("&TildeTilde;", 0xC5, 0x2248),
    ("&approx;", 0xC5, 0x2248),
    ("&thkap;", 0xC5, 0x2248),
    ("&thickapprox;", 0xC5, 0x2248),
    ("&Delta;", 0xC6, 0x394),
    ("&hellip;", 0xC9, 0x2026),
    ("&mldr;", 0xC9, 0x2026),
    ("&OElig;", 0xCE, 0x152),
    ("&oelig;", 0xCF, 0x153),
    ("&ndash;", 0xD0, 0x2013),
    ("&mdash;", 0xD1, 0x2014),
    ("&ldquo;", 0xD2, 0x201C),
    ("&OpenCurlyDoubleQuote;", 0xD2, 0x201C),
    ("&rdquo;", 0xD3, 0x201D),
    ("&rdquor;", 0xD3, 0x201D),
    ("&CloseCurlyDoubleQuote;", 0xD3, 0x201D),
    ("&lsquo;", 0xD4, 0x2018),
    ("&OpenCurlyQuote;", 0xD4, 0x2018),
    ("&rsquo;", 0xD5, 0x2019),
    ("&rsquor;", 0xD5, 0x2019),
    ("&CloseCurlyQuote;", 0xD5, 0x2019),
    ("&loz;", 0xD7, 0x25CA),
    ("&lozenge;", 0xD7, 0x25CA),
    ("&Yuml;", 0xD9, 0x178),
    ("&frasl;", 0xDA, 0x2044),
    ("&lsaquo;", 0xDC, 0x2039),
    ("&rsaquo;", 0xDD, 0x203A),
    ("&filig;", 0xDE, 0xFB01),
    ("&fllig;", 0xDF, 0xFB02),
    ("&Dagger;", 0xE0, 0x2021),
    ("&ddagger;", 0xE0, 0x2021),
    ("&lsquor;", 0xE2, 0x201A),
    ("&sbquo;", 0xE2, 0x201A),
    ("&ldquor;", 0xE3, 0x201E),
    ("&bdquo;", 0xE3, 0x201E),
    ("&permil;", 0xE4, 0x2030),
    ("", 0xF0, 0xF8FF),  # Apple logo; no named reference
    ("&imath;", 0xF5, 0x131),
    ("&inodot;", 0xF5, 0x131),
    ("&circ;", 0xF6, 0x2C6),
    ("&tilde;", 0xF7, 0x2DC),
    ("&DiacriticalTilde;", 0xF7, 0x2DC),
    ("&breve;", 0xF9, 0x2D8),
    ("&Breve;", 0xF9, 0x2D8),
    ("&dot;", 0xFA, 0x2D9),
    ("&DiacriticalDot;", 0xFA, 0x2D9),
    ("&ring;", 0xFB, 0x2DA),
    ("&dblac;", 0xFD, 0x2DD),
    ("&DiacriticalDoubleAcute;", 0xFD, 0x2DD),
    ("&ogon;", 0xFE, 0x2DB),
    ("&caron;", 0xFF, 0x2C7),
    ("&Hacek;", 0xFF, 0x2C7),
)

ENTITIES: tuple[Entity, ...] = tuple(Entity(*row) for row in _TABLE)

_BY_NAME: dict[str, int] = {}
_BY_UNICODE: dict[int, int] = {}
for _e in ENTITIES:
    if _e.name:
        _BY_NAME.setdefault(_e.name, _e.char)
    _BY_UNICODE.setdefault(_e.unicode, _e.char)
del _e


def _code_point(text: str) -> Optional[int]:
    """Parse '&#NNN;' or '&#xHHH;' into a code point, else None."""
    if text[1] != '#':
        return None
    body = text[2:-1]
    if body[:1] in ('x', 'X'):
        digits = body[1:]
        return int(digits, 16) if _HEX_RE.match(digits) else None
    return int(body, 10) if _DECIMAL_RE.match(body) else None


def resolve_entity(text: str) -> Optional[int]:
    """Return the target byte for a character reference, or None if unrecognized.

    `text` is the reference as written, e.g. '&amp;', '&#65;' or '&#x41;'.
    Numeric references in 1-127 map straight to that byte; everything else
    goes through the table, by exact name or by code point.
    """
    if len(text) < 4 or text[0] != '&' or text[-1] != ';':
        return None

    code_point = _code_point(text)
    if code_point is not None:
        if 0 < code_point < 128:
            return code_point
        return _BY_UNICODE.get(code_point)
    return _BY_NAME.get(text)


def lookup_code_point(code_point: int) -> Optional[int]:
    """Return the target byte for a Unicode code point, or None."""
    if 0 < code_point < 128:
        return code_point
    return _BY_UNICODE.get(code_point)


def encode_text(text: str) -> bytes:
    """Encode literal text into the target set; unmapped characters become '?'."""
    if text.isascii():
        return text.encode('ascii')
    out = bytearray()
    for ch in text:
        byte = lookup_code_point(ord(ch))
        if byte is None:
            logger.debug("No target character for U+%04X, substituting '?'", ord(ch))
            byte = REPLACEMENT_BYTE
        out.append(byte)
    return bytes(out)

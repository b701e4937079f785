"""
Last-resort PDF text recovery straight from the file bytes.

Used only when the text layer cannot be read or yields too little. Two passes
over the raw buffer and over every content stream that inflates with zlib
(FlateDecode):

1. BT ... ET text objects are tokenized and the operands of the show-text
   operators (Tj, ', ", TJ) are collected.
2. Any printable, letter-bearing (...) string outside text objects, except
   document-info values such as /Producer or /CreationDate.

Results are de-duplicated and joined with single spaces. Line structure is
not preserved, so the output is always flagged low-confidence.
"""

import logging
import re
import zlib
from typing import Iterator, List, Optional, Tuple

from app.core.documents import ExtractedText, RawDocument

logger = logging.getLogger(__name__)

STREAM_RE = re.compile(rb"stream\r?\n(.*?)endstream", re.DOTALL)
TEXT_OBJECT_RE = re.compile(rb"\bBT\b(.*?)\bET\b", re.DOTALL)
LOOSE_STRING_RE = re.compile(rb"\((?:[^()\\]|\\.){4,}?\)", re.DOTALL)
INFO_KEY_RE = re.compile(rb"/(?:Producer|Creator|CreationDate|ModDate)\s*$")
PAGE_OBJECT_RE = re.compile(rb"/Type\s*/Page\b")
NUMBER_RE = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)")

WHITESPACE = b" \t\r\n\f\x00"
DELIMITERS = b"()<>[]{}/%"

LITERAL_ESCAPES = {
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("("): b"(",
    ord(")"): b")",
    ord("\\"): b"\\",
}

# TJ kerning at or below this (thousandths of an em) reads as a word gap
TJ_SPACE_THRESHOLD = -200

SHOW_TEXT_OPERATORS = {"Tj", "'", '"'}

Token = Tuple[str, object]


# ===== LEXER =====

def read_literal(data: bytes, pos: int) -> Tuple[bytes, int]:
    """
    Read a (...) string starting at `pos` (the opening parenthesis).

    Handles balanced nested parentheses, the standard escapes, 1-3 digit octal
    codes and backslash line continuations. Returns (bytes, index after ")").
    An unterminated string runs to the end of the buffer.
    """
    out = bytearray()
    depth = 1
    i = pos + 1
    n = len(data)
    while i < n:
        c = data[i]
        if c == 0x5C:  # backslash
            i += 1
            if i >= n:
                break
            e = data[i]
            if e in LITERAL_ESCAPES:
                out += LITERAL_ESCAPES[e]
                i += 1
            elif 0x30 <= e <= 0x37:
                j = i
                while j < n and j < i + 3 and 0x30 <= data[j] <= 0x37:
                    j += 1
                out.append(int(data[i:j], 8) & 0xFF)
                i = j
            elif e == 0x0D:
                i += 2 if data[i + 1:i + 2] == b"\n" else 1
            elif e == 0x0A:
                i += 1
            else:
                out.append(e)
                i += 1
            continue
        if c == 0x28:
            depth += 1
        elif c == 0x29:
            depth -= 1
            if depth == 0:
                return bytes(out), i + 1
        out.append(c)
        i += 1
    return bytes(out), n


def _hex_string(body: bytes) -> bytes:
    digits = re.sub(rb"[^0-9A-Fa-f]", b"", body)
    if len(digits) % 2:
        digits += b"0"
    return bytes.fromhex(digits.decode("ascii"))


def tokenize(data: bytes) -> Iterator[Token]:
    """Yield (kind, value) tokens: string, number, name, operator, array_start, array_end."""
    i = 0
    n = len(data)
    while i < n:
        c = data[i:i + 1]
        if c in WHITESPACE:
            i += 1
        elif c == b"%":
            nl = data.find(b"\n", i)
            i = n if nl == -1 else nl + 1
        elif c == b"(":
            raw, i = read_literal(data, i)
            yield "string", raw
        elif c == b"<":
            if data[i + 1:i + 2] == b"<":
                i += 2
                continue
            end = data.find(b">", i + 1)
            if end == -1:
                return
            yield "string", _hex_string(data[i + 1:end])
            i = end + 1
        elif c == b"[":
            yield "array_start", None
            i += 1
        elif c == b"]":
            yield "array_end", None
            i += 1
        elif c in b">{})":
            i += 1
        else:
            j = i + 1 if c == b"/" else i
            while j < n and data[j:j + 1] not in WHITESPACE and data[j:j + 1] not in DELIMITERS:
                j += 1
            word = data[i:j]
            i = max(j, i + 1)
            if word.startswith(b"/"):
                yield "name", word[1:].decode("latin-1")
            elif NUMBER_RE.fullmatch(word):
                yield "number", float(word)
            else:
                yield "operator", word.decode("latin-1")


# ===== TEXT OBJECTS =====

def decode_pdf_string(raw: bytes) -> str:
    if raw.startswith(b"\xfe\xff"):
        return raw[2:].decode("utf-16-be", errors="ignore")
    return raw.decode("latin-1")


def _render_tj(items: List[Token]) -> str:
    parts = []
    for kind, value in items:
        if kind == "string":
            parts.append(decode_pdf_string(value))
        elif kind == "number" and value <= TJ_SPACE_THRESHOLD:
            parts.append(" ")
    return "".join(parts)


def _last(operands: List[Token], kind: str) -> Optional[object]:
    for k, v in reversed(operands):
        if k == kind:
            return v
    return None


def show_text_runs(block: bytes) -> List[str]:
    """Strings painted by the show-text operators of one BT ... ET block."""
    runs: List[str] = []
    operands: List[Token] = []
    arrays: List[List[Token]] = []

    for kind, value in tokenize(block):
        if kind == "array_start":
            arrays.append([])
            continue
        if kind == "array_end":
            if arrays:
                items = arrays.pop()
                (arrays[-1] if arrays else operands).append(("array", items))
            continue
        if kind == "operator" and not arrays:
            if value in SHOW_TEXT_OPERATORS:
                raw = _last(operands, "string")
                if raw is not None:
                    runs.append(decode_pdf_string(raw))
            elif value == "TJ":
                items = _last(operands, "array")
                if items is not None:
                    runs.append(_render_tj(items))
            operands.clear()
            continue
        (arrays[-1] if arrays else operands).append((kind, value))

    return runs


# ===== BUFFERS =====

def inflated_streams(data: bytes) -> List[bytes]:
    """Bodies of streams that decompress with zlib; others are skipped."""
    out = []
    for m in STREAM_RE.finditer(data):
        try:
            inflated = zlib.decompressobj().decompress(m.group(1))
        except zlib.error:
            continue
        if inflated:
            out.append(inflated)
    return out


def _has_letters(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def _clean(text: str) -> str:
    return " ".join(text.split())


def text_object_tokens(buffer: bytes) -> List[str]:
    tokens = []
    for m in TEXT_OBJECT_RE.finditer(buffer):
        for run in show_text_runs(m.group(1)):
            t = _clean(run)
            if t and _has_letters(t):
                tokens.append(t)
    return tokens


def loose_string_tokens(buffer: bytes) -> List[str]:
    """Printable (...) strings outside text objects, document-info values excluded."""
    outside = TEXT_OBJECT_RE.sub(b" ", buffer)
    tokens = []
    for m in LOOSE_STRING_RE.finditer(outside):
        if INFO_KEY_RE.search(outside[max(0, m.start() - 32):m.start()]):
            continue
        raw, _ = read_literal(outside, m.start())
        t = _clean(decode_pdf_string(raw))
        if len(t) > 3 and t.isprintable() and re.search(r"[A-Za-z]{2,}", t):
            tokens.append(t)
    return tokens


class PdfRawStreamExtractor:
    name = "pdf-raw-stream"

    def extract(self, document: RawDocument) -> ExtractedText:
        data = document.data
        try:
            buffers = [data] + inflated_streams(data)
            first = [t for buf in buffers for t in text_object_tokens(buf)]
            second = [t for buf in buffers for t in loose_string_tokens(buf)]
        except Exception as e:
            logger.warning(f"Raw PDF stream scan failed: {type(e).__name__}: {e}")
            return ExtractedText.failed(self.name, f"{type(e).__name__}: {e}")

        # Exact-match de-duplication, first occurrence wins
        tokens = list(dict.fromkeys(first + second))
        text = " ".join(tokens)
        page_count = len(PAGE_OBJECT_RE.findall(data))
        logger.info(
            f"Raw PDF stream scan: {len(buffers) - 1} inflated streams, "
            f"{len(first)} show-text tokens, {len(second)} loose strings, {len(text)} chars"
        )
        return ExtractedText(text=text, method=self.name, page_count=page_count, low_confidence=True)

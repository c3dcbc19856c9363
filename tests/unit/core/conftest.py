"""Shared fixtures for core unit tests"""

import io

import pytest

from mdteach.core.interpreter import DocumentCompiler
from mdteach.core.parse import _make_parser
from mdteach.core.sink import OutputSink


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

Footer paragraph.
"""

SAMPLE_FM_MD = """\
---
title: Test Doc
tags: [a, b]
---

# Title

Body content.
"""


class RecordingHandler:
    """Event handler that records every callback as a tuple."""

    def __init__(self):
        self.events = []

    def enter_block(self, kind, detail=None):
        self.events.append(("enter_block", kind, detail))

    def leave_block(self, kind, detail=None):
        self.events.append(("leave_block", kind))

    def enter_span(self, kind, detail=None):
        self.events.append(("enter_span", kind, detail))

    def leave_span(self, kind, detail=None):
        self.events.append(("leave_span", kind))

    def text(self, kind, text):
        self.events.append(("text", kind, text))

    def trace(self, message):
        self.events.append(("trace", message))


@pytest.fixture(name="parser")
def parser_fixture():
    return _make_parser("commonmark")


@pytest.fixture(name="recorder")
def recorder_fixture():
    return RecordingHandler()


@pytest.fixture(name="out")
def out_fixture():
    return io.BytesIO()


@pytest.fixture(name="compiler")
def compiler_fixture(out):
    return DocumentCompiler(OutputSink(out, capacity=16))


@pytest.fixture(name="sample_tokens")
def sample_tokens_fixture(parser):
    return parser.parse(SAMPLE_MD)


@pytest.fixture(name="sample_fm_file")
def sample_fm_file_fixture(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text(SAMPLE_FM_MD)
    return path

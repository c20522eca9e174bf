"""Tests for the document scanner."""

from __future__ import annotations

from typing import Iterable

from bs4 import BeautifulSoup

from ampscript.detectors import Detector
from ampscript.scanner import (
    DocumentScanner,
    existing_components,
    has_runtime_script,
    parse_document,
)


class _RawDetector(Detector):
    name = "raw"

    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        return self.names


def test_scan_unions_detector_output() -> None:
    html = (
        '<amp-state id="s"></amp-state>'
        '<button on="tap:AMP.setState({a: 1})">go</button>'
        '<div amp-access="ok"></div>'
        '<amp-img lightbox src="a.jpg"></amp-img>'
    )

    required = DocumentScanner().scan(parse_document(html))

    assert required == {"amp-bind", "amp-access", "amp-analytics", "amp-lightbox-gallery"}


def test_scan_with_trace_reports_each_detector_in_order() -> None:
    html = '<amp-state id="s"></amp-state><button on="tap:AMP.setState({})">go</button>'

    trace = DocumentScanner().scan_with_trace(parse_document(html))

    names = [name for name, _ in trace]
    assert names[:3] == ["elements", "state-mutation", "bound-attributes"]
    assert trace[0] == ("elements", ["amp-bind"])
    assert trace[1] == ("state-mutation", ["amp-bind"])
    assert trace[2] == ("bound-attributes", [])


def test_scan_canonicalises_plugin_contributions() -> None:
    scanner = DocumentScanner([_RawDetector(["AMP-State", "amp-img", "div", "amp-sidebar"])])

    assert scanner.scan(parse_document("<p></p>")) == {"amp-bind", "amp-sidebar"}


def test_existing_components_reads_element_and_template_scripts() -> None:
    html = (
        '<script async custom-element="amp-bind" src="x"></script>'
        '<script async custom-template="amp-mustache" src="y"></script>'
        '<script src="other.js"></script>'
    )

    assert existing_components(parse_document(html)) == {"amp-bind", "amp-mustache"}


def test_has_runtime_script_matches_base_runtime_only() -> None:
    runtime = '<script async src="https://cdn.ampproject.org/v0.js"></script>'
    extension = (
        '<script async custom-element="amp-bind" '
        'src="https://cdn.ampproject.org/v0.js"></script>'
    )

    assert has_runtime_script(parse_document(runtime)) is True
    assert has_runtime_script(parse_document(extension)) is False
    assert has_runtime_script(parse_document("<p></p>")) is False
    assert has_runtime_script(
        parse_document('<script async src="https://cdn.example.org/v0.js"></script>'),
        "https://cdn.example.org/",
    ) is True


def test_has_runtime_script_ignores_query_and_accepts_lts_channel() -> None:
    for src in (
        "https://cdn.ampproject.org/v0.js?f=sxg",
        "https://cdn.ampproject.org/lts/v0.js",
        "https://cdn.ampproject.org/v0.mjs",
        "//cdn.ampproject.org/v0.js",
    ):
        document = parse_document(f'<script async src="{src}"></script>')
        assert has_runtime_script(document) is True, src

    for src in (
        "https://cdn.example.org/v0.js",
        "https://cdn.ampproject.org/v0/amp-bind-0.1.js",
        "https://cdn.ampproject.org/other/v0.js",
    ):
        document = parse_document(f'<script async src="{src}"></script>')
        assert has_runtime_script(document) is False, src

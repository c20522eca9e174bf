"""End-to-end tests for the script importer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ampscript.injector import Injector
from ampscript.models import DetectionMode, InsertionMode, ValidatorFinding
from ampscript.pipeline import (
    ImportOptions,
    ScriptImporter,
    SourceDocument,
    UnsupportedInputError,
)
from ampscript.stores import VersionMapStore
from ampscript.validators import ValidationResult
from ampscript.versions import UnresolvedComponentError

DATA_DIR = Path(__file__).parent / "data"
RUNTIME = '<script async src="https://cdn.ampproject.org/v0.js"></script>'


def read_fixture(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "name",
    [
        "base",
        "amp-bind",
        "amp-access-attribute",
        "amp-access-script",
        "amp-access-laterpay",
        "amp-geo",
        "amp-dynamic-classes",
        "amp-mustache",
        "amp-fx-collection",
        "amp-lightbox-gallery",
    ],
)
def test_fixture_documents_receive_expected_scripts(importer: ScriptImporter, name: str) -> None:
    html = read_fixture(f"{name}.in.html")
    expected = read_fixture(f"{name}.expected.html")

    assert importer.add_scripts(html) == expected


def test_custom_placeholder_is_replaced(importer: ScriptImporter) -> None:
    html = read_fixture("custom-placeholder.in.html")

    result = importer.add_scripts(html, ImportOptions(placeholder="[AMPJS]"))

    assert result == read_fixture("base.expected.html")


def test_completed_document_is_left_untouched(importer: ScriptImporter) -> None:
    for name in ("base", "amp-access-laterpay", "amp-mustache"):
        expected = read_fixture(f"{name}.expected.html")
        assert importer.add_scripts(expected) == expected


def test_output_is_idempotent_in_head_mode(importer: ScriptImporter) -> None:
    html = read_fixture("amp-geo.in.html").replace("  ${ampjs}\n", "")
    options = ImportOptions(mode=InsertionMode.HEAD)

    once = importer.add_scripts(html, options)
    twice = importer.add_scripts(once, options)

    assert once != html
    assert twice == once
    assert once.count("amp-bind-0.1.js") == 1
    assert once.count(RUNTIME) == 1


def test_head_mode_nests_scripts_under_head() -> None:
    html = "<html>\n  <head>\n    <title>x</title>\n  </HEAD>\n  <body></body>\n</html>\n"
    importer = ScriptImporter()

    result = importer.add_scripts(html, ImportOptions(mode=InsertionMode.HEAD))

    assert result == (
        "<html>\n  <head>\n    <title>x</title>\n"
        f"    {RUNTIME}\n"
        "  </head>\n  <body></body>\n</html>\n"
    )


def test_processing_is_deterministic(importer: ScriptImporter) -> None:
    html = read_fixture("amp-access-laterpay.in.html")

    outputs = {importer.add_scripts(html) for _ in range(3)}

    assert len(outputs) == 1


def test_state_mutation_and_state_element_yield_one_declaration(importer: ScriptImporter) -> None:
    html = (
        "<head>\n  ${ampjs}\n</head>\n"
        '<amp-state id="s"><script type="application/json">{}</script></amp-state>\n'
        '<p [text]="s.label">x</p>\n'
        '<button on="tap:AMP.setState({s: {label: 1}})">Go</button>\n'
    )

    result = importer.add_scripts(html)

    assert result.count('custom-element="amp-bind"') == 1


def test_unsatisfied_placeholder_remains_when_nothing_is_needed(importer: ScriptImporter) -> None:
    html = f"<head>\n  {RUNTIME}\n  ${{ampjs}}\n</head>\n"

    assert importer.add_scripts(html) == html


def test_existing_lts_runtime_is_not_declared_again(importer: ScriptImporter) -> None:
    runtime = '<script async src="https://cdn.ampproject.org/lts/v0.js?f=sxg"></script>'
    html = f"<head>\n  {runtime}\n  ${{ampjs}}\n</head>\n<amp-carousel></amp-carousel>\n"

    result = importer.add_scripts(html)

    assert RUNTIME not in result
    assert result.count("/v0.js") == 1
    assert "amp-carousel-0.2.js" in result


def test_override_beats_forced_latest_and_discovered_version(importer: ScriptImporter) -> None:
    html = read_fixture("amp-bind.in.html")
    options = ImportOptions(overrides={"amp-bind": "0.2"}, force_latest=True)

    result = importer.add_scripts(html, options)

    assert "amp-bind-0.2.js" in result
    assert "amp-bind-0.1.js" not in result


def test_forced_latest_beats_discovered_version(importer: ScriptImporter) -> None:
    html = read_fixture("amp-bind.in.html")

    result = importer.add_scripts(html, ImportOptions(force_latest=True))

    assert "https://cdn.ampproject.org/v0/amp-bind-latest.js" in result


def test_unknown_component_fails_without_output(importer: ScriptImporter) -> None:
    html = "<head>\n  ${ampjs}\n</head>\n<amp-unheard-of></amp-unheard-of>\n"

    with pytest.raises(UnresolvedComponentError) as excinfo:
        importer.add_scripts(html)

    assert excinfo.value.component == "amp-unheard-of"


def test_missing_cache_file_reads_as_empty_map(tmp_path: Path) -> None:
    importer = ScriptImporter(store=VersionMapStore(tmp_path / "absent.json"))
    html = read_fixture("amp-bind.in.html")

    with pytest.raises(UnresolvedComponentError):
        importer.add_scripts(html)


class _StubValidator:
    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        self.calls: list[str] = []

    def validate(self, html: str) -> ValidationResult:
        self.calls.append(html)
        return self.result


def test_validator_detection_uses_findings_only(version_store: VersionMapStore) -> None:
    validator = _StubValidator(
        ValidationResult(
            status="FAIL",
            findings=[
                ValidatorFinding("MANDATORY_TAG_MISSING", ("amphtml engine v0.js script",)),
                ValidatorFinding("MISSING_REQUIRED_EXTENSION", ("amp-carousel", "amp-carousel")),
            ],
        )
    )
    importer = ScriptImporter(validator=validator, store=version_store)
    # The button would trigger the scanner, but the validator decides here.
    html = read_fixture("amp-bind.in.html")

    result = importer.add_scripts(html, ImportOptions(detection=DetectionMode.VALIDATOR))

    assert validator.calls == [html]
    assert "amp-carousel-0.2.js" in result
    assert "amp-bind" not in result.split("<body>")[0]
    assert result.count(RUNTIME) == 1


def test_validator_detection_skips_runtime_unless_reported(version_store: VersionMapStore) -> None:
    validator = _StubValidator(
        ValidationResult(
            status="FAIL",
            findings=[ValidatorFinding("ATTR_MISSING_REQUIRED_EXTENSION", ("lightbox", "amp-lightbox-gallery"))],
        )
    )
    importer = ScriptImporter(validator=validator, store=version_store)

    result = importer.add_scripts(
        "<head>\n    ${ampjs}\n</head>", ImportOptions(detection=DetectionMode.VALIDATOR)
    )

    assert result == (
        "<head>\n"
        '    <script async custom-element="amp-lightbox-gallery" '
        'src="https://cdn.ampproject.org/v0/amp-lightbox-gallery-0.1.js"></script>\n'
        "</head>"
    )


def test_update_versions_refreshes_before_resolving(tmp_path: Path) -> None:
    store = VersionMapStore(tmp_path / "components.json")
    listing = [
        "extensions/amp-bind/0.1",
        "extensions/amp-bind/0.1/amp-bind.js",
    ]
    importer = ScriptImporter(store=store, fetcher=lambda url: listing)

    result = importer.add_scripts(
        read_fixture("amp-bind.in.html"), ImportOptions(update_versions=True)
    )

    assert result == read_fixture("amp-bind.expected.html")
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"amp-bind": "0.1"}


def test_transform_passes_documents_through(importer: ScriptImporter) -> None:
    html = read_fixture("amp-bind.in.html")
    stream = iter([b"chunk"])
    documents = [
        SourceDocument(path=Path("a.html"), content=html.encode("utf-8")),
        SourceDocument(path=Path("empty.html"), content=None),
        SourceDocument(path=Path("stream.html"), content=stream),
        SourceDocument(path=Path("bad.html"), content="<head>${ampjs}</head><amp-nope></amp-nope>"),
    ]

    outcomes = list(importer.transform(documents))

    assert outcomes[0].changed is True
    assert outcomes[0].content == read_fixture("amp-bind.expected.html").encode("utf-8")
    assert outcomes[1].content is None and outcomes[1].error is None
    assert isinstance(outcomes[2].error, UnsupportedInputError)
    assert outcomes[2].content is stream
    assert isinstance(outcomes[3].error, UnresolvedComponentError)
    assert outcomes[3].content == "<head>${ampjs}</head><amp-nope></amp-nope>"
    assert outcomes[3].changed is False


def test_configured_placeholder_is_used_by_injector() -> None:
    injector = Injector("@@scripts@@")
    importer = ScriptImporter(injector=injector)

    result = importer.add_scripts(
        "<head>\n\t@@scripts@@\n</head>", ImportOptions(placeholder="@@scripts@@")
    )

    assert result == f"<head>\n\t{RUNTIME}\n</head>"

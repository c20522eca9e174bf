"""Detection, version resolution and injection for single documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Optional

from .components import DEFAULT_LISTING_URL, DEFAULT_PLACEHOLDER
from .config import AmpScriptConfig
from .injector import Injector
from .logging import get_logger
from .models import DetectionMode, InsertionMode, Requirements
from .scanner import DocumentScanner, existing_components, has_runtime_script, parse_document
from .stores import VersionMapStore, refresh_version_map
from .tags import TagBuilder
from .validators import AmpValidator, requirements_from_findings
from .versions import VersionResolver, VersionSources


class UnsupportedInputError(TypeError):
    """Raised for document payloads that are neither text nor bytes."""


@dataclass
class ImportOptions:
    """Per-invocation settings for adding scripts to a document."""

    placeholder: str = DEFAULT_PLACEHOLDER
    mode: InsertionMode = InsertionMode.PLACEHOLDER
    detection: DetectionMode = DetectionMode.SCANNER
    overrides: Mapping[str, str] = field(default_factory=dict)
    force_latest: bool = False
    update_versions: bool = False

    @classmethod
    def from_config(cls, config: AmpScriptConfig) -> "ImportOptions":
        return cls(
            placeholder=config.placeholder,
            mode=config.mode,
            detection=config.detection,
            overrides=config.resolved_overrides(),
            force_latest=config.force_latest,
        )


@dataclass
class SourceDocument:
    """A document handed to the importer by a transport."""

    path: Optional[Path]
    content: object


@dataclass
class TransformOutcome:
    """A document handed back to the transport after processing."""

    path: Optional[Path]
    content: object
    changed: bool = False
    error: Optional[Exception] = None


class ScriptImporter:
    """Adds the missing AMP runtime and extension scripts to AMP HTML documents."""

    def __init__(
        self,
        *,
        scanner: DocumentScanner | None = None,
        validator: AmpValidator | None = None,
        tag_builder: TagBuilder | None = None,
        injector: Injector | None = None,
        store: VersionMapStore | None = None,
        listing_url: str = DEFAULT_LISTING_URL,
        fetcher: Callable[[str], Iterable[str]] | None = None,
    ) -> None:
        self.scanner = scanner or DocumentScanner()
        self._validator = validator
        self.tag_builder = tag_builder or TagBuilder()
        self.injector = injector or Injector()
        self.store = store
        self.listing_url = listing_url
        self._fetcher = fetcher
        self.logger = get_logger("pipeline")

    @classmethod
    def from_config(cls, config: AmpScriptConfig) -> "ScriptImporter":
        return cls(
            validator=AmpValidator(
                config.validator.executable, timeout=config.validator.timeout
            ),
            tag_builder=TagBuilder(config.cdn_base),
            injector=Injector(config.placeholder),
            store=VersionMapStore(config.cache_path) if config.cache_path else None,
            listing_url=config.listing_url,
        )

    @property
    def validator(self) -> AmpValidator:
        if self._validator is None:
            self._validator = AmpValidator()
        return self._validator

    def refresh_versions(self) -> Mapping[str, str]:
        """Rebuild and persist the discovered version map."""
        if self.store is None:
            raise RuntimeError("Refreshing versions requires a version map store")
        return refresh_version_map(self.store, self.listing_url, fetcher=self._fetcher)

    def requirements(self, html: str, detection: DetectionMode) -> Requirements:
        """Return what the document is missing according to the chosen detection source.

        The validator source only asks for the runtime when the validator reports
        it missing. The scanner source asks for it whenever the document does not
        already load it, and skips components whose script is already declared.
        """
        if detection is DetectionMode.VALIDATOR:
            return requirements_from_findings(self.validator.validate(html))
        document = parse_document(html)
        found = self.scanner.scan(document)
        return Requirements(
            components=found - existing_components(document),
            runtime=not has_runtime_script(document, self.tag_builder.cdn_base),
        )

    def add_scripts(self, html: str, options: ImportOptions | None = None) -> str:
        """Return ``html`` with the missing script declarations injected.

        Raises ``UnresolvedComponentError`` before touching the text when a
        required component has no known version.
        """
        options = options or ImportOptions()
        discovered: Mapping[str, str] = {}
        if options.update_versions:
            discovered = self.refresh_versions()
        elif self.store is not None:
            discovered = self.store.load()

        required = self.requirements(html, options.detection)
        if not required:
            self.logger.debug("Document needs no additional scripts")
            return html

        resolver = VersionResolver(
            VersionSources(
                overrides=options.overrides,
                force_latest=options.force_latest,
                discovered=discovered,
            )
        )
        resolved = resolver.resolve_all(required.components)
        declarations = self.tag_builder.render(resolved, runtime=required.runtime)

        updated = self.injector.inject(html, declarations, options.mode, options.placeholder)
        if updated == html:
            self.logger.warning(
                "No insertion point found for %d script(s) in %s mode",
                len(declarations),
                options.mode.value,
            )
        else:
            self.logger.info("Injected %d script declaration(s)", len(declarations))
        return updated

    def transform(
        self, documents: Iterable[SourceDocument], options: ImportOptions | None = None
    ) -> Iterator[TransformOutcome]:
        """Process documents one at a time, passing failures through unmodified."""
        for source in documents:
            content = source.content
            if content is None:
                yield TransformOutcome(path=source.path, content=None)
                continue
            if not isinstance(content, (str, bytes)):
                error = UnsupportedInputError("Streams not supported!")
                self.logger.error("%s: %s", source.path or "<document>", error)
                yield TransformOutcome(path=source.path, content=content, error=error)
                continue
            try:
                html = content.decode("utf-8") if isinstance(content, bytes) else content
                updated = self.add_scripts(html, options)
            except Exception as exc:
                self.logger.error("Failed to add scripts to %s: %s", source.path or "<document>", exc)
                yield TransformOutcome(path=source.path, content=content, error=exc)
                continue
            output: object = updated.encode("utf-8") if isinstance(content, bytes) else updated
            yield TransformOutcome(path=source.path, content=output, changed=updated != html)


__all__ = [
    "ImportOptions",
    "ScriptImporter",
    "SourceDocument",
    "TransformOutcome",
    "UnsupportedInputError",
]

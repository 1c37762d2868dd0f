"""High-level orchestration: discover inputs, normalise, project, render, write."""
from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .enginelib.asset_graph import AssetDecoder
from .enginelib.casing import ReservedWordRegistry
from .enginelib.errors import ConfigError, NoInputFound, Rejection
from .enginelib.normalizer import BatchResult, find_candidate_files, process_batch
from .enginelib.render import TemplateEngine, renderer_for
from .enginelib.scene_document import SceneDocumentDecoder
from .enginelib.state_store import StateStore

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


@dataclass
class GeneratorConfig:
    input_path: Path
    output_path: Optional[Path] = None
    template_path: Optional[Path] = None
    language: str = "dart"
    engine: TemplateEngine = TemplateEngine.MUSTACHE
    ignore_private: bool = False
    atomic_writes: bool = True
    backup_dir: Optional[Path] = None
    data_json: Optional[Path] = None
    state_file: Optional[Path] = None
    reserved_words_file: Optional[Path] = None

    @staticmethod
    def from_mapping(
        mapping: Dict[str, Any],
        base_dir: Optional[Path] = None,
    ) -> "GeneratorConfig":
        def resolve(value: Optional[str]) -> Optional[Path]:
            if value in (None, ""):
                return None
            path = Path(value)
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            return path

        if not mapping.get("input"):
            raise ConfigError("'input' is required")
        return GeneratorConfig(
            input_path=resolve(mapping["input"]),
            output_path=resolve(mapping.get("output")),
            template_path=resolve(mapping.get("template")),
            language=str(mapping.get("language", "dart")).lower(),
            engine=TemplateEngine.parse(mapping.get("engine", "mustache")),
            ignore_private=bool(mapping.get("ignore_private", False)),
            atomic_writes=bool(mapping.get("atomic_writes", True)),
            backup_dir=resolve(mapping.get("backup_dir")),
            data_json=resolve(mapping.get("data_json")),
            state_file=resolve(mapping.get("state_file")),
            reserved_words_file=resolve(mapping.get("reserved_words_file")),
        )


@dataclass
class GenerationResult:
    ok: bool
    output_path: Optional[Path] = None
    files: List[str] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)
    hash_output: Optional[str] = None
    changed_inputs: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "output": str(self.output_path) if self.output_path else None,
            "count": len(self.files),
            "files": list(self.files),
            "rejected": [rejection.summary() for rejection in self.rejected],
            "hash_output": self.hash_output,
            "changed_inputs": list(self.changed_inputs),
        }


class GeneratorService:
    """Coordinate one generation run over a file or a directory of files."""

    def __init__(self, config: GeneratorConfig, decoder: Optional[AssetDecoder] = None):
        self.config = config
        self.decoder = decoder or SceneDocumentDecoder()
        self.registry = ReservedWordRegistry(config.reserved_words_file)
        self.registry.set_active(config.language)
        self.caser = self.registry.caser()
        self.renderer = renderer_for(config.engine)
        self.state_store = StateStore(config.state_file) if config.state_file else None
        self.recent_events: List[Dict[str, Any]] = []

    @classmethod
    def from_config_file(cls, path: Path, **overrides: Any) -> "GeneratorService":
        path = Path(path)
        with open(path, "r", encoding="utf-8") as handle:
            mapping = yaml.safe_load(handle) or {}
        if not isinstance(mapping, dict):
            raise ConfigError(f"Config file {path} must hold a mapping")
        mapping.update({key: value for key, value in overrides.items() if value is not None})
        return cls(GeneratorConfig.from_mapping(mapping, path.parent))

    # ----------------------- pipeline -----------------------
    def collect(self) -> BatchResult:
        """Normalise every candidate file; rejected files are reported and skipped."""
        paths = find_candidate_files(self.config.input_path, self.decoder.extension)
        if not paths:
            raise NoInputFound(self.config.input_path, self.decoder.extension)
        batch = process_batch(
            paths,
            self.decoder,
            caser=self.caser,
            ignore_private=self.config.ignore_private,
        )
        self._record_event("collect", batch.summary())
        return batch

    def template_data(self, batch: BatchResult) -> Dict[str, Any]:
        return self.renderer.projector.project_batch(batch.assets)

    def template_text(self) -> str:
        custom = self.config.template_path
        if custom is not None:
            try:
                text = custom.read_text(encoding="utf-8")
            except OSError as exc:
                logger.warning("Unable to open template file %s (%s), falling back to default template", custom, exc)
            else:
                logger.info("Using custom template from %s", custom)
                return text
        default = TEMPLATES_DIR / f"{self.config.language}{self.renderer.template_suffix}"
        if not default.exists():
            raise ConfigError(
                f"{self.config.language} code generation is not yet supported without a custom template"
            )
        return default.read_text(encoding="utf-8")

    def inspect(self) -> Dict[str, Any]:
        return self.template_data(self.collect())

    def validate(self) -> BatchResult:
        return self.collect()

    def generate(self) -> GenerationResult:
        if self.config.output_path is None:
            raise ConfigError("'output' is required to generate code")
        template = self.template_text()
        batch = self.collect()
        data = self.template_data(batch)
        logger.info("Using %s template engine", self.renderer.engine.value)
        rendered = self.renderer.render(template, data)

        output_path = self._write_output(rendered)
        if self.config.data_json is not None:
            self._write_json(self.config.data_json, data)
        digest = hashlib.sha256(rendered.encode("utf-8")).hexdigest()
        result = GenerationResult(
            ok=batch.ok,
            output_path=output_path,
            files=[asset.original_file_name for asset in batch.assets],
            rejected=list(batch.rejections),
            hash_output=digest,
        )
        if self.state_store is not None:
            result.changed_inputs = self.state_store.changed_inputs(batch.input_files)
            self.state_store.record_run(
                input_files=batch.input_files,
                files_total=len(result.files),
                rejected=[rejection.summary() for rejection in batch.rejections],
                hash_output=digest,
            )
        self._record_event("generate", result.summary())
        logger.info("File generated successfully: %s", output_path)
        return result

    # ----------------------- write output -----------------------
    def _write_output(self, text: str) -> Path:
        output_path = Path(self.config.output_path)
        if not output_path.is_absolute():
            output_path = Path.cwd() / output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.config.atomic_writes:
            with open(output_path, "w", encoding="utf-8") as handle:
                handle.write(text)
            return output_path
        tmp_path = Path(f"{output_path}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        if self.config.backup_dir is not None and output_path.exists():
            self.config.backup_dir.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            backup_path = self.config.backup_dir / f"{output_path.stem}_{timestamp}{output_path.suffix}"
            shutil.copy2(output_path, backup_path)
            self._record_event("backup", {"file": str(backup_path)})
        os.replace(tmp_path, output_path)
        return output_path

    @staticmethod
    def _write_json(path: Path, data: Dict[str, Any]):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)

    # ----------------------- status & logs -----------------------
    def status_payload(self) -> Dict[str, Any]:
        metrics = self.state_store.load() if self.state_store is not None else {}
        return {
            "language": self.registry.active_name,
            "engine": self.renderer.engine.value,
            "ignore_private": self.config.ignore_private,
            "metrics": metrics,
        }

    def recent_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        return list(self.recent_events[-limit:])

    def _record_event(self, event_type: str, payload: Dict[str, Any]):
        event = {"type": event_type, "timestamp": time.time(), "payload": payload}
        self.recent_events.append(event)

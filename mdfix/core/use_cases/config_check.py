"""
Config check use case — validate mdfix.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mdfix.core.config.loader import ConfigError, find_config_file, load_config, project_root
from mdfix.core.models.config import FixerConfig
from mdfix.core.services.md_transforms import rule_names


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: FixerConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "roots": list(self.config.roots) if self.config else [],
            "disabled_rules": list(self.config.disable) if self.config else [],
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the fixer configuration and report issues.

    Args:
        config_path: Optional explicit path to mdfix.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    result.config_path = config_path

    if config_path is None:
        result.warnings.append("No mdfix.yml found. Using default roots.")

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Rules
    known = set(rule_names())
    unknown = [name for name in config.disable if name not in known]
    if unknown:
        result.errors.append(f"Unknown rule names in 'disable': {', '.join(unknown)}")

    # Extensions
    bad_ext = [ext for ext in config.extensions if not ext.startswith(".") or len(ext) < 2]
    if bad_ext:
        result.errors.append(
            f"Extensions must look like '.md': {', '.join(repr(e) for e in bad_ext)}"
        )
    if not config.extensions:
        result.errors.append("No extensions configured. Nothing would be fixed.")

    # Roots
    if not config.roots:
        result.warnings.append("No roots configured. Nothing would be fixed.")

    dupes = sorted({r for r in config.roots if config.roots.count(r) > 1})
    if dupes:
        result.warnings.append(f"Duplicate roots: {', '.join(dupes)}")

    base = project_root(config_path)
    resolved = config.resolve_roots(base)
    for name, path in zip(config.roots, resolved):
        if not path.exists():
            result.warnings.append(f"Root does not exist: {name}")

    # Nested roots get walked twice
    unique = list(dict.fromkeys(p.resolve() for p in resolved))
    for inner in unique:
        for outer in unique:
            if inner != outer and outer in inner.parents:
                result.warnings.append(
                    f"Root {inner} is inside {outer}; its files are fixed twice."
                )

    result.valid = len(result.errors) == 0
    return result

"""Per-language generation settings and configuration file loading."""

from pathlib import Path

import yaml
from pydantic import BaseModel

FILE_KEYS = {
    "apiPackage": "api_package",
    "modelPackage": "model_package",
    "additionalProperties": "additional_properties",
}


class LanguageConfig(BaseModel):
    """Settings for rendering examples in one client language."""

    lang: str
    api_package: str | None = None
    model_package: str | None = None
    additional_properties: dict[str, str] = {}


def load_config_file(path: Path) -> dict:
    """Load a JSON or YAML configuration file.

    Recognized keys: apiPackage, modelPackage, additionalProperties.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping.")
    settings = {}
    for key, field in FILE_KEYS.items():
        if key in data:
            settings[field] = data[key]
    if "additional_properties" in settings:
        settings["additional_properties"] = {
            str(k): str(v) for k, v in (settings["additional_properties"] or {}).items()
        }
    return settings


def parse_key_value_pairs(text: str | None) -> dict[str, str]:
    """Parse 'name=value,name=value'. Entries without a key or value are skipped."""
    result = {}
    for pair in split_list(text):
        key, sep, value = pair.partition("=")
        if sep and key and value:
            result[key] = value
    return result


def split_list(text: str | None) -> list[str]:
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def build_configs(
    languages: str,
    config_file: Path | None = None,
    api_package: str | None = None,
    model_package: str | None = None,
    system_properties: str | None = None,
) -> list[LanguageConfig]:
    """Build one LanguageConfig per requested language, in the order given.

    Values passed explicitly override those read from the configuration file.
    """
    settings = load_config_file(config_file) if config_file else {}
    if api_package:
        settings["api_package"] = api_package
    if model_package:
        settings["model_package"] = model_package
    extra = parse_key_value_pairs(system_properties)
    if extra:
        settings["additional_properties"] = {**settings.get("additional_properties", {}), **extra}

    configs = []
    for lang in split_list(languages):
        if any(c.lang == lang for c in configs):
            continue
        configs.append(LanguageConfig(lang=lang, **settings))
    return configs

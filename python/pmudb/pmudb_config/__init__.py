import dataclasses
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

DEFAULT_CONFIG_FILE = Path("defaults.yaml")


@dataclasses.dataclass(frozen=True)
class ConfigBase:

    def merge(self, config_overrides: Mapping[str, Any] | None) -> "ConfigBase":
        def _merge(old: MutableMapping[str, Any], new: Mapping[str, Any]) -> None:
            for k, v in new.items():
                if k not in old:
                    raise ValueError(f"unknown {type(self).__name__} option: {k}")
                # nested configs merge their own overrides
                elif isinstance(old[k], ConfigBase):
                    old[k] = old[k].merge(v)
                elif not (isinstance(v, dict) and isinstance(old[k], dict)):
                    old[k] = v
                else:
                    _merge(old=old[k], new=v)

        if not config_overrides:
            return self
        merged_config = dict[str, Any]()
        for field in dataclasses.fields(self):
            merged_config[field.name] = getattr(self, field.name)
        _merge(old=merged_config, new=config_overrides)
        return dataclasses.replace(self, **merged_config)

    def merge_file(self, config_file: Path) -> "ConfigBase":
        return self.merge(yaml.safe_load(config_file.read_text()))

    def dump(self) -> str:
        return "---\n" + yaml.dump(dataclasses.asdict(self), sort_keys=False)


__all__ = [
    "ConfigBase",
    "DEFAULT_CONFIG_FILE",
]

import yaml
from typing import Any, Dict, Optional

from retro_step6502.core.errors import ConfigError
from .models import EmulatorConfig, PROGRAM_FORMATS


class ConfigLoader:
    def load_from_file(self, path: str) -> EmulatorConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return self.parse_config(data or {})

    def parse_config(self, data: Dict[str, Any]) -> EmulatorConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        fmt = data.get("format", "binary")
        if fmt not in PROGRAM_FORMATS:
            raise ConfigError(f"Unsupported program format: {fmt}")

        load_address = self._parse_int(data.get("load_address", 0x0200))
        if not 0 <= load_address <= 0xFFFF:
            raise ConfigError(f"load_address out of range: {load_address:#x}")
        stack_pointer = self._parse_int(data.get("stack_pointer", 0xFF))
        if not 0 <= stack_pointer <= 0xFF:
            raise ConfigError(f"stack_pointer out of range: {stack_pointer:#x}")

        program = data.get("program")
        return EmulatorConfig(
            program=str(program) if program is not None else None,
            format=fmt,
            load_address=load_address,
            stack_pointer=stack_pointer,
            debug=bool(data.get("debug", False)),
            max_instructions=self._parse_optional_int(data.get("max_instructions")),
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.lower().startswith("0x"):
                    return int(text, 16)
                if text.startswith("$"):
                    return int(text[1:], 16)
                return int(text)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")

# spinwheel/domain/wheel/factories/wheel_factory.py
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from spinwheel.domain.spin.errors import InvalidWheelError
from ..entities.option import Option
from ..entities.wheel import Wheel, WheelConfig

MIN_OPTIONS = 2
MIN_WEIGHT = 0.1


def generate_id() -> str:
    return uuid.uuid4().hex[:9]


class WheelFactory:
    """
    Builds Wheel entities from their dictionary form (YAML files, saved wheels).

    Applies the same rules as the wheel editor: options without a label are
    dropped, labels are trimmed, missing ids are generated, weights default to
    1 and must be at least MIN_WEIGHT, and at least MIN_OPTIONS labeled
    options must remain.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.wheel.factory")

    def create_wheel(self, config: Dict[str, Any], wheel_id: Optional[str] = None) -> Wheel:
        """
        Create a wheel from a configuration dictionary.

        Args:
            config: {"id", "title", "options": [...], "config": {...}}
            wheel_id: Overrides config["id"] (e.g. the YAML file name)

        Returns:
            Validated Wheel

        Raises:
            InvalidWheelError: If the wheel breaks any editor rule
        """
        wheel_id = wheel_id or config.get("id") or generate_id()
        title = str(config.get("title") or wheel_id).strip()

        options = self._build_options(wheel_id, config.get("options") or [])

        try:
            wheel_config = WheelConfig.from_dict(config.get("config") or {})
        except ValueError as e:
            raise InvalidWheelError(wheel_id, str(e)) from e

        wheel = Wheel(
            id=wheel_id,
            title=title,
            options=options,
            config=wheel_config,
            created_at=config.get("created_at") or time.time(),
        )
        wheel.validate()

        self.logger.debug(f"Created {wheel!r}")
        return wheel

    def create_wheels(self, configs: Dict[str, Dict[str, Any]],
                      ignore_errors: bool = False) -> Dict[str, Wheel]:
        """
        Create wheels from a name -> config mapping (YamlConfigLoader.load_directory).

        Args:
            configs: Wheel configurations keyed by name
            ignore_errors: Log and skip invalid wheels instead of raising

        Returns:
            Wheels keyed by id
        """
        wheels = {}
        for name, config in configs.items():
            try:
                wheel = self.create_wheel(config, wheel_id=config.get("id") or name)
            except InvalidWheelError as e:
                if not ignore_errors:
                    raise
                self.logger.error(f"Skipping wheel {name}: {e.message}")
                continue
            wheels[wheel.id] = wheel

        self.logger.info(f"Created {len(wheels)} wheels")
        return wheels

    def _build_options(self, wheel_id: str, raw_options: List[Any]) -> List[Option]:
        options = []
        for raw in raw_options:
            if isinstance(raw, str):
                raw = {"label": raw}

            label = str(raw.get("label") or "").strip()
            if not label:
                continue

            try:
                weight = float(raw.get("weight", 1) or 1)
            except (TypeError, ValueError) as e:
                raise InvalidWheelError(wheel_id, f"option {label!r} has a non-numeric weight") from e

            if weight < MIN_WEIGHT:
                raise InvalidWheelError(
                    wheel_id, f"option {label!r} has weight {weight}, minimum is {MIN_WEIGHT}")

            options.append(Option(id=str(raw.get("id") or generate_id()), label=label, weight=weight))

        if len(options) < MIN_OPTIONS:
            raise InvalidWheelError(
                wheel_id, f"at least {MIN_OPTIONS} labeled options are required, got {len(options)}")

        return options

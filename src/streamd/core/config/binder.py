"""
Binding of dotted setting paths onto a :class:`DaemonConfiguration`.

``bind(target, "fanoutConfig.consumerArn", "arn:...")`` splits the path
into a head (``fanoutConfig``) and a remainder (``consumerArn``):

* head names a scalar field → convert the value and assign it;
* head names a nested node  → forward the remainder (or ``class`` when
  there is none) to the node, unconverted;
* anything else             → unknown setting, handled per
  :class:`~streamd.core.config.components.UnknownSettingPolicy`.
"""

from __future__ import annotations

from collections.abc import Mapping

from streamd.core.errors import BindingError
from streamd.core.logging import get_logger

from .components import UnknownSettingPolicy
from .converters import TypeConverterRegistry, default_converters
from .daemon import SCALAR_FIELDS, DaemonConfiguration
from .nodes import CLASS_KEY

logger = get_logger(__name__)


class PropertyBinder:
    def __init__(
        self,
        converters: TypeConverterRegistry | None = None,
        *,
        unknown_settings: UnknownSettingPolicy = UnknownSettingPolicy.FAIL,
    ) -> None:
        self.converters = converters or default_converters()
        self.unknown_settings = unknown_settings

    def bind(self, target: DaemonConfiguration, path: str, value: str) -> bool:
        """Apply one setting to *target*.

        Returns ``False`` when the setting was unknown and skipped under the
        ``IGNORE`` policy, ``True`` otherwise.
        """
        head, _, remainder = path.strip().partition(".")

        spec = SCALAR_FIELDS.get(head)
        if spec is not None:
            if remainder:
                return self._unknown(path, f"'{head}' is a scalar setting and has no property '{remainder}'")
            # converted before assignment, so a failure leaves target untouched
            converted = self.converters.convert(value, spec.target, setting=head)
            setattr(target, spec.attribute, converted)
            logger.debug("setting_bound", setting=head)
            return True

        node = target.node(head)
        if node is not None:
            key = remainder or CLASS_KEY
            if not node.accepts(key):
                return self._unknown(path, f"Unknown setting '{key}' on '{head}'", node=head)
            node.set(key, value)
            logger.debug("setting_bound", setting=path, node=head)
            return True

        return self._unknown(path)

    def bind_all(self, target: DaemonConfiguration, raw_settings: Mapping[str, str]) -> list[str]:
        """Apply every setting in *raw_settings*; return the paths that were ignored.

        Keys are applied in sorted order so the outcome, including which
        error is reported first, does not depend on mapping order.
        """
        ignored: list[str] = []
        for path in sorted(raw_settings):
            if not self.bind(target, path, raw_settings[path]):
                ignored.append(path)
        return ignored

    def _unknown(self, path: str, message: str | None = None, *, node: str | None = None) -> bool:
        if self.unknown_settings == UnknownSettingPolicy.IGNORE:
            logger.warning("setting_ignored", setting=path, reason=message or "unknown setting")
            return False
        raise BindingError(path, message, node=node)

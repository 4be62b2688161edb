"""Parameter suggestions from an optional advisory service.

The advisory service inspects an encoded image and proposes a partial set
of mesh settings with a short rationale. It is a convenience only: when no
client is configured, or the client fails in any way, hard-coded default
advice is returned instead. ``request_advice`` therefore never raises.

Service replies use camelCase keys (``useCase``, ``suggestedSettings``,
``heightScale``); snake_case is accepted as well.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_snake

from mono3d.config import MeshSettings
from mono3d.exceptions import AdvisoryError

logger = logging.getLogger(__name__)


class Advice(BaseModel):
    """A settings suggestion with its rationale."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    use_case: str = Field(default="General 3D Object", alias="useCase")
    suggested_settings: dict[str, Any] = Field(default_factory=dict, alias="suggestedSettings")
    from_service: bool = False

    def apply(self, settings: MeshSettings) -> MeshSettings:
        """Apply the suggestion on top of ``settings``.

        Invalid suggested values leave ``settings`` unchanged.
        """
        try:
            return settings.merged_with(self.suggested_settings)
        except ValidationError as e:
            logger.warning("Ignoring invalid advisory settings: %s", e)
            return settings


NO_CREDENTIAL_ADVICE = Advice(
    summary="Defaulting to high-quality presets.",
    use_case="General 3D Object",
    suggested_settings={"resolution": 160},
)

FAILURE_ADVICE = Advice(
    summary="Manual tuning recommended for best results.",
    use_case="Custom STL",
    suggested_settings={},
)


class AdvisoryClient(Protocol):
    """Remote service that analyzes an encoded image."""

    def analyze(self, image_bytes: bytes) -> Mapping[str, Any]:
        """Return a mapping with ``summary``, ``useCase`` and
        ``suggestedSettings`` keys."""
        ...


def parse_advice(payload: Mapping[str, Any]) -> Advice:
    """Validate a raw service response.

    Setting names are converted to snake_case and unknown ones are
    dropped. Values are checked against MeshSettings so a bad suggestion
    is rejected as a whole.

    Raises:
        AdvisoryError: If the response is malformed
    """
    try:
        advice = Advice.model_validate({**payload, "from_service": True})
    except (ValidationError, TypeError) as e:
        raise AdvisoryError(f"malformed response: {e}") from e

    renamed = {to_snake(key): value for key, value in advice.suggested_settings.items()}
    known = {key: value for key, value in renamed.items() if key in MeshSettings.model_fields}
    try:
        MeshSettings().merged_with(known)
    except ValidationError as e:
        raise AdvisoryError(f"invalid suggested settings: {e}") from e

    return advice.model_copy(update={"suggested_settings": known})


def request_advice(image_bytes: bytes, client: AdvisoryClient | None = None) -> Advice:
    """Ask the advisory service for settings, falling back to defaults.

    Args:
        image_bytes: Encoded image (e.g. PNG bytes)
        client: Service client; None means no credential is configured

    Returns:
        Parsed advice from the service, or default advice on any failure
    """
    if client is None:
        logger.debug("No advisory client configured, using default presets")
        return NO_CREDENTIAL_ADVICE

    try:
        return parse_advice(client.analyze(image_bytes))
    except Exception as e:
        logger.warning("Advisory analysis failed: %s", e)
        return FAILURE_ADVICE

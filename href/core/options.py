"""
Text reconstruction policy.

The exact extent of a collapsed-selection delete is observable in replayed
text, so it is a per-inputType policy rather than one hard-coded rule.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from .events import INPUT_TYPES
from .units import DeleteUnit

DEFAULT_DELETE_UNITS: Dict[str, DeleteUnit] = {
    "deleteContentBackward": DeleteUnit.CODE_POINT,
    "deleteContentForward": DeleteUnit.CODE_POINT,
    "deleteWordBackward": DeleteUnit.WORD,
    "deleteWordForward": DeleteUnit.WORD,
    "deleteSoftLineBackward": DeleteUnit.LINE,
    "deleteSoftLineForward": DeleteUnit.LINE,
    "deleteHardLineBackward": DeleteUnit.LINE,
    "deleteHardLineForward": DeleteUnit.LINE,
}


@dataclass(frozen=True)
class ReconstructorOptions:
    """
    Policy knobs for text reconstruction.

    Fields:
        mutating_types: Input event types that edit committed text
        delete_units: Unit removed per delete verb on a collapsed selection
        default_delete_unit: Unit for directional delete verbs not listed above
    """
    mutating_types: Tuple[str, ...] = INPUT_TYPES
    delete_units: Mapping[str, DeleteUnit] = field(default_factory=lambda: dict(DEFAULT_DELETE_UNITS))
    default_delete_unit: DeleteUnit = DeleteUnit.CODE_POINT

    def delete_unit_for(self, input_type: str) -> DeleteUnit:
        return self.delete_units.get(input_type, self.default_delete_unit)

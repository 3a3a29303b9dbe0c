"""Configuration of the user-function inliner."""

from dataclasses import dataclass

from ._str_enum_with_doc import StrEnumWithDoc


class UnmatchedPolicy(StrEnumWithDoc):
    """What to do with a call-site edge that matches no boundary marker."""

    WARN = "warn", "Log a warning and leave the edge pointing at the removed call node"
    DROP = "drop", "Log a warning and remove the edge"
    RAISE = "raise", "Abort inlining with UnmatchedBoundaryError"


@dataclass(frozen=True, slots=True)
class InlinerConfig:
    """Conventions the inliner uses to read function bodies.

    Attributes:
        input_marker: Component type of the import-boundary node in a body.
        output_marker: Component type of the export-boundary node in a body.
        marker_prefix: Every body node whose component type starts with this
            prefix is a system node and is removed when the body is spliced.
        name_attribute: Attribute key holding the boundary slot name.
        prefix_template: Format string for the per-call identifier prefix,
            filled with the inliner's counter value.
        max_passes: Upper bound on fixpoint passes before giving up.
        on_unmatched: Policy for call-site edges with no matching marker.
        rename_slots: Also prefix slot names of spliced body edges. Off by
            default because slot names are the call interface of nested
            user functions and primitives.

    """

    input_marker: str = "UF_Input"
    output_marker: str = "UF_Output"
    marker_prefix: str = "UF_"
    name_attribute: str = "Name"
    prefix_template: str = "uf_{}_"
    max_passes: int = 64
    on_unmatched: UnmatchedPolicy = UnmatchedPolicy.WARN
    rename_slots: bool = False

    def is_marker(self, component_type: str) -> bool:
        """Check whether a component type is a boundary/system marker.

        An empty ``marker_prefix`` disables prefix matching, leaving only the
        input and output marker types.
        """
        if component_type in (self.input_marker, self.output_marker):
            return True
        return bool(self.marker_prefix) and component_type.startswith(self.marker_prefix)

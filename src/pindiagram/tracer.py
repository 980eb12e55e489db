"""
Debug tracing infrastructure for pindiagram.

When debug mode is enabled, the generator records every stage of the
pipeline and every markup fragment it emits. This is useful for:
1. Finding which step produced a given line of markup
2. Seeing intermediate results (peripheral set, colors, legend grid)
3. Writing targeted tests against specific emission decisions

Usage:
    >>> generator = DiagramGenerator()
    >>> tex = generator.generate(mcu, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("debug_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FragmentRecord:
    """
    Record of one emitted markup fragment.

    Attributes:
        index: Position of the fragment in the document.
        section: Name of the emission section (e.g. "LEGEND").
        source: The method that produced the fragment.
        text: The fragment's markup.
    """

    index: int
    section: str
    source: str
    text: str

    def __str__(self) -> str:
        text = self.text.rstrip()
        return f"[{self.index}] {self.section} from {self.source}: {text}"


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Stages, in order: package, peripherals, colors, legend, label_chains,
    document.

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
        document_snapshot: Optional markup lines emitted so far
    """

    name: str
    data: Dict[str, Any]
    document_snapshot: Optional[List[str]] = None

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        if self.document_snapshot:
            lines.append(f"  Document: {len(self.document_snapshot)} lines")
        return "\n".join(lines)


@dataclass
class RenderTrace:
    """
    Complete trace of a render operation.

    Attributes:
        stages: Pipeline stages with their data
        fragments: Every emitted fragment, in document order
        model: The MCU model being rendered
        package: The package identifier
    """

    stages: List[PipelineStage] = field(default_factory=list)
    fragments: List[FragmentRecord] = field(default_factory=list)
    model: str = ""
    package: str = ""

    def add_stage(
        self,
        name: str,
        data: Dict[str, Any],
        document: Optional[str] = None,
    ) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "legend")
            data: Dictionary of relevant data at this stage
            document: Optional markup emitted so far
        """
        snapshot = None
        if document is not None:
            snapshot = document.splitlines()
        self.stages.append(PipelineStage(name, data.copy(), snapshot))

    def add_fragment(self, section: str, source: str, text: str) -> None:
        self.fragments.append(
            FragmentRecord(len(self.fragments), section, source, text)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_fragments_by_section(self, section: str) -> List[FragmentRecord]:
        return [f for f in self.fragments if f.section == section]

    def get_fragments_by_source(self, source_substring: str) -> List[FragmentRecord]:
        """Get all fragments from a specific source (partial match)."""
        return [f for f in self.fragments if source_substring in f.source]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the model, the pipeline stages and fragment
        counts per section.
        """
        lines = [
            "=" * 60,
            "RENDER TRACE SUMMARY",
            "=" * 60,
            "",
            f"Model: {self.model}",
            f"Package: {self.package}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            has_document = "+" if stage.document_snapshot else "-"
            lines.append(f"  [{has_document}] {stage.name}")

        lines.extend(["", f"Total fragments: {len(self.fragments)}", ""])

        section_counts: Dict[str, int] = {}
        for f in self.fragments:
            section_counts[f.section] = section_counts.get(f.section, 0) + 1

        lines.append("Fragments by section:")
        for section, count in section_counts.items():
            lines.append(f"  {section}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Summary, every stage, then every fragment."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("FRAGMENTS:")
        lines.append("-" * 40)
        for f in self.fragments:
            lines.append(str(f))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())

    def dump_document_evolution(self) -> str:
        """Show the markup added by each stage that took a document snapshot."""
        lines = [
            "=" * 60,
            "DOCUMENT EVOLUTION",
            "=" * 60,
        ]

        shown = 0
        for stage in self.stages:
            if stage.document_snapshot:
                lines.append("")
                lines.append(f"--- After: {stage.name} ---")
                for row in stage.document_snapshot[shown:]:
                    lines.append(f"|{row}")
                shown = len(stage.document_snapshot)

        return "\n".join(lines)

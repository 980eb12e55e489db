"""Tests for DiagramGenerator."""

import pytest

from pindiagram import DiagramGenerator, generate_diagram
from pindiagram.debug import DocumentInspector
from pindiagram.errors import PackageTooSmallForLegend, UnsupportedPackage
from pindiagram.models import Mcu, Pin


class TestGenerate:
    """Tests for DiagramGenerator.generate."""

    def test_returns_bytes(self, generator, lqfp48_mcu):
        """The document is returned as bytes."""
        assert isinstance(generator.generate(lqfp48_mcu), bytes)

    def test_section_order(self, generator, lqfp48_mcu):
        """Preamble, outline, legend, labels and closing appear in order."""
        text = generator.generate(lqfp48_mcu).decode("utf-8")
        markers = [
            "\\documentclass[crop,tikz]{standalone}",
            "\\definecolor{colorEVENTOUT}",
            "\\begin{tikzpicture}[x=12pt,y=12pt]",
            "\\draw[thick] (0, 0) --",
            "\\node[right = 0.1 of P1, rotate=90] {1};",
            "anchor=west] at (3, 10) {EVENTOUT};",
            "(p1label0) {VBAT};",
            "\\end{tikzpicture}",
            "\\end{document}",
        ]
        positions = [text.index(marker) for marker in markers]
        assert positions == sorted(positions)
        assert text.endswith("\\end{document}\n")

    def test_colors_sorted(self, generator, lqfp48_mcu):
        """One color definition per peripheral, sorted."""
        colors = DocumentInspector(generator.generate(lqfp48_mcu)).color_definitions()
        assert list(colors) == [
            "colorEVENTOUT",
            "colorI2C1",
            "colorTIM1",
            "colorTIM2",
            "colorTIM4",
            "colorUSART1",
            "colorUSART2",
        ]

    def test_outline_coordinates(self, generator, lqfp48_mcu):
        """Every pin of the package gets an outline coordinate."""
        coordinates = DocumentInspector(generator.generate(lqfp48_mcu)).coordinates()
        assert len(coordinates) == 48
        assert coordinates["P1"] == 2 / 15
        assert coordinates["P12"] == 13 / 15

    def test_pin_numbers_for_every_pin(self, generator, lqfp48_mcu):
        """Pin numbers cover the package, not only listed pins."""
        result = DocumentInspector(generator.generate(lqfp48_mcu)).classify()
        assert [node.text for node in result.pin_numbers] == [
            str(n) for n in range(1, 49)
        ]
        assert len(result.pin_names) == 8

    def test_pin_number_directions(self, generator, lqfp48_mcu):
        """Pin numbers are positioned towards the inside."""
        inspector = DocumentInspector(generator.generate(lqfp48_mcu))
        numbers = {node.text: node for node in inspector.classify().pin_numbers}
        assert numbers["1"].options == ["right = 0.1 of P1", "rotate=90"]
        assert numbers["13"].options == ["left = 0.1 of P13", "rotate=0"]
        assert numbers["25"].options == ["left = 0.1 of P25", "rotate=90"]
        assert numbers["37"].options == ["right = 0.1 of P37", "rotate=0"]

    def test_declared_function_order(self, generator, lqfp48_mcu):
        """Chains follow declared function order."""
        inspector = DocumentInspector(generator.generate(lqfp48_mcu))
        assert inspector.chain(30) == ["PA9", "TX", "CH2", "CK"]
        assert inspector.chain(42) == ["PB6", "SCL", "CH1", "TX"]

    def test_deterministic(self, lqfp48_mcu):
        """Two generators with the same seed give identical bytes."""
        assert DiagramGenerator().generate(lqfp48_mcu) == DiagramGenerator().generate(
            lqfp48_mcu
        )

    def test_seed(self, lqfp48_mcu):
        """A different seed only changes color values."""
        first = DiagramGenerator(seed=1).generate(lqfp48_mcu).decode("utf-8")
        second = DiagramGenerator(seed=2).generate(lqfp48_mcu).decode("utf-8")
        assert first != second
        strip = [line for line in first.splitlines() if "definecolor" not in line]
        assert strip == [
            line for line in second.splitlines() if "definecolor" not in line
        ]

    def test_configuration(self, lqfp48_mcu):
        """Unit, font size, distance and tint appear in the markup."""
        generator = DiagramGenerator(
            unit="10pt", font_size=8, label_distance=0.2, fill_tint=40
        )
        text = generator.generate(lqfp48_mcu).decode("utf-8")
        assert "\\fontsize{8}{10}\\selectfont" in text
        assert "[x=10pt,y=10pt]" in text
        assert "right = 0.2 of P1," in text
        assert "fill=colorUSART1!40" in text

    def test_functions_without_peripheral_skipped(self, generator):
        """Functions with an empty peripheral part get no color, entry or label."""
        mcu = Mcu("X", "LQFP48", [Pin(1, "PA0", ("_TX", "", "UART_RX"))])
        inspector = DocumentInspector(generator.generate(mcu))
        result = inspector.classify()
        assert list(inspector.color_definitions()) == ["colorUART"]
        assert [e.text for e in result.legend_entries] == ["UART"]
        assert [label.text for label in result.function_labels] == ["RX"]
        assert "{color}" not in generator.generate(mcu).decode("utf-8")

    def test_unsupported_package_no_output(self, generator):
        """Errors propagate and nothing is returned."""
        mcu = Mcu("X", "TFBGA216", [Pin(1, "PA0")])
        with pytest.raises(UnsupportedPackage):
            generator.generate(mcu)

    def test_strict_legend(self, qfp4_mcu):
        """legend_fallback=False makes small packages fail."""
        with pytest.raises(PackageTooSmallForLegend):
            DiagramGenerator(legend_fallback=False).generate(qfp4_mcu)


class TestGenerateWithStats:
    """Tests for generate_with_stats."""

    def test_stats(self, generator, lqfp48_mcu):
        """Statistics describe the rendered diagram."""
        document, stats = generator.generate_with_stats(lqfp48_mcu)
        assert document == generator.generate(lqfp48_mcu)
        assert stats["pins"] == 8
        assert stats["pin_count"] == 48
        assert stats["peripherals"] == 7
        assert stats["legend_rows"] == 5
        assert stats["legend_columns"] == 2
        assert stats["function_labels"] == 15
        # P30 -> PA9 -> TX -> CH2 -> CK
        assert stats["longest_chain"] == 4

    def test_fragment_count(self, generator, qfp4_mcu):
        """Fragments: 4 preamble, 8 package, 2 legend, 8 labels, 1 closing."""
        _, stats = generator.generate_with_stats(qfp4_mcu)
        assert stats["fragments"] == 23
        assert stats["names"] == 14


class TestDebugMode:
    """Tests for debug tracing through the generator."""

    def test_no_trace_by_default(self, generator, lqfp48_mcu):
        """Without debug there is no trace."""
        generator.generate(lqfp48_mcu)
        assert generator.get_trace() is None

    def test_stages(self, generator, lqfp48_mcu):
        """Debug mode records every pipeline stage."""
        generator.generate(lqfp48_mcu, debug=True)
        trace = generator.get_trace()
        assert [stage.name for stage in trace.stages] == [
            "package",
            "peripherals",
            "colors",
            "legend",
            "label_chains",
            "document",
        ]
        assert trace.model == "STM32F401CCUx"
        assert trace.get_stage("legend").data["rows"] == 5

    def test_fragments_match_document(self, generator, lqfp48_mcu):
        """Traced fragments concatenate to the document."""
        document = generator.generate(lqfp48_mcu, debug=True)
        trace = generator.get_trace()
        assert "".join(f.text for f in trace.fragments).encode("utf-8") == document
        assert len(trace.get_fragments_by_section("LEGEND")) == 7

    def test_debug_output_identical(self, generator, lqfp48_mcu):
        """Tracing does not change the output."""
        assert generator.generate(lqfp48_mcu, debug=True) == generator.generate(
            lqfp48_mcu
        )


class TestSaving:
    """Tests for writing output files."""

    def test_save_tex(self, generator, lqfp48_mcu, tmp_path):
        """save_tex writes the generated bytes."""
        path = tmp_path / "pinout.tex"
        generator.save_tex(lqfp48_mcu, path)
        assert path.read_bytes() == generator.generate(lqfp48_mcu)

    def test_save_tex_failure_writes_nothing(self, generator, tmp_path):
        """No file is created when generation fails."""
        path = tmp_path / "pinout.tex"
        with pytest.raises(UnsupportedPackage):
            generator.save_tex(Mcu("X", "SO8", []), path)
        assert not path.exists()

    def test_save_png(self, generator, lqfp48_mcu, tmp_path):
        """save_png writes a PNG preview."""
        path = tmp_path / "pinout.png"
        result = generator.save_png(lqfp48_mcu, path, peripherals={"USART1"})
        assert result == str(path)
        assert path.read_bytes().startswith(b"\x89PNG")


class TestGenerateDiagram:
    """Tests for the generate_diagram convenience function."""

    def test_matches_generator(self, lqfp48_mcu):
        """The convenience function passes options through."""
        assert generate_diagram(lqfp48_mcu, {"TIM2"}, seed=3) == DiagramGenerator(
            seed=3
        ).generate(lqfp48_mcu, {"TIM2"})

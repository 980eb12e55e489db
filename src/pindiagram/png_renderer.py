"""
PNG Renderer module for pinout diagrams.

Renders a PinoutLayout as a PNG preview: package outline, pin numbers,
legend and label chains with tinted peripheral fills. The typesetter
positions TikZ labels from real font metrics; here they are placed from
Pillow's text metrics, so the preview is close to, but not identical to,
the typeset diagram.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .layout import PinoutLayout
from .sides import Side


@dataclass
class _Item:
    """A text item positioned in layout units (y pointing up)."""

    cx: float
    cy: float
    width: float
    height: float
    text: str
    rotation: int
    fill: Optional[Tuple[int, int, int]] = None


class PNGRenderer:
    """Renders pinout layouts as PNG images."""

    def __init__(
        self,
        unit_px: int = 12,
        scale: int = 2,
        margin: int = 20,
        font_size: int = 10,
        font_path: Optional[str] = None,
        label_distance: float = 0.1,
        label_padding: int = 2,
        fill_tint: int = 30,
        bg_color: Tuple[int, int, int] = (255, 255, 255),
    ):
        self.unit_px = unit_px
        self.scale = scale
        self.margin = margin
        self.font_size = font_size
        self.font_path = font_path
        self.label_distance = label_distance
        self.label_padding = label_padding
        self.fill_tint = fill_tint

        # Colors
        self.bg_color = bg_color
        self.outline_color = (0, 0, 0)
        self.text_color = (0, 0, 0)

        self.font = None

    @property
    def px(self) -> int:
        """Pixels per layout unit."""
        return self.unit_px * self.scale

    def _get_font(self) -> ImageFont.FreeTypeFont:
        """Get a font for rendering text."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale

        font_options = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
            "/System/Library/Fonts/Helvetica.ttc",
            "C:/Windows/Fonts/arial.ttf",
        ]
        if self.font_path:
            font_options.insert(0, self.font_path)

        for path in font_options:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        try:
            self.font = ImageFont.load_default(size=font_size)
        except TypeError:
            # Older Pillow versions don't support size parameter
            self.font = ImageFont.load_default()
        return self.font

    def _text_size(self, text: str) -> Tuple[float, float]:
        """Text size in layout units, padding included."""
        bbox = self._get_font().getbbox(text or " ")
        pad = 2 * self.label_padding * self.scale
        return (bbox[2] - bbox[0] + pad) / self.px, (bbox[3] - bbox[1] + pad) / self.px

    def _place(
        self,
        anchor: Tuple[float, float],
        direction: Tuple[int, int],
        text: str,
        side: Side,
        fill=None,
    ) -> _Item:
        """Place an item just beyond ``anchor`` along ``direction``."""
        width, height = self._text_size(text)
        if side.rotation == 90:
            width, height = height, width
        dx, dy = direction
        extent = height if dy else width
        offset = self.label_distance + extent / 2
        return _Item(
            cx=anchor[0] + dx * offset,
            cy=anchor[1] + dy * offset,
            width=width,
            height=height,
            text=text,
            rotation=side.rotation,
            fill=fill,
        )

    def _layout_items(self, layout: PinoutLayout) -> List[_Item]:
        geometry = layout.geometry
        items: List[_Item] = []

        for position in range(1, geometry.pin_count + 1):
            side = Side.from_index((position - 1) // geometry.pins_per_side)
            dx, dy = side.outward
            items.append(
                self._place(
                    geometry.pin_coordinate(position), (-dx, -dy), str(position), side
                )
            )

        for cell in layout.legend:
            width, height = self._text_size(cell.peripheral)
            items.append(
                _Item(
                    cx=cell.x + width / 2,
                    cy=cell.y,
                    width=width,
                    height=height,
                    text=cell.peripheral,
                    rotation=0,
                    fill=cell.color.tint(self.fill_tint).to_rgb255(),
                )
            )

        for chain in layout.chains:
            direction = chain.side.outward
            item = self._place(
                geometry.pin_coordinate(chain.pin.position),
                direction,
                chain.pin.name,
                chain.side,
            )
            items.append(item)
            for link in chain.links:
                far_edge = (
                    item.cx + direction[0] * item.width / 2,
                    item.cy + direction[1] * item.height / 2,
                )
                color = layout.colors[link.peripheral].tint(self.fill_tint)
                item = self._place(
                    far_edge, direction, link.signal, chain.side, color.to_rgb255()
                )
                items.append(item)

        return items

    def render(self, layout: PinoutLayout, output_path: str = "pinout.png") -> str:
        """
        Render the layout as a PNG image.

        Args:
            layout: Computed pinout layout
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        items = self._layout_items(layout)
        size = layout.geometry.edge_length

        min_x = min([0.0] + [i.cx - i.width / 2 for i in items])
        max_x = max([float(size)] + [i.cx + i.width / 2 for i in items])
        min_y = min([0.0] + [i.cy - i.height / 2 for i in items])
        max_y = max([float(size)] + [i.cy + i.height / 2 for i in items])

        margin = self.margin * self.scale

        def to_px(x: float, y: float) -> Tuple[int, int]:
            # Layout y points up, image y points down.
            return (
                round((x - min_x) * self.px) + margin,
                round((max_y - y) * self.px) + margin,
            )

        width = round((max_x - min_x) * self.px) + 2 * margin
        height = round((max_y - min_y) * self.px) + 2 * margin
        img = Image.new("RGB", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img)

        corners = [to_px(x, y) for x, y in layout.geometry.corners]
        draw.polygon(corners, outline=self.outline_color, width=max(1, 2 * self.scale))

        for item in items:
            self._draw_item(img, draw, item, to_px)

        img.save(output_path, "PNG", dpi=(300, 300))
        return output_path

    def _draw_item(self, img: Image.Image, draw: ImageDraw.ImageDraw, item, to_px):
        """Draw an optional filled box and its centered, possibly rotated text."""
        left, top = to_px(item.cx - item.width / 2, item.cy + item.height / 2)
        right, bottom = to_px(item.cx + item.width / 2, item.cy - item.height / 2)
        if item.fill is not None:
            draw.rectangle(
                [left, top, right, bottom],
                fill=item.fill,
                outline=self.outline_color,
                width=max(1, self.scale // 2),
            )

        font = self._get_font()
        bbox = font.getbbox(item.text or " ")
        text_img = Image.new(
            "RGBA", (bbox[2] - bbox[0] + 1, bbox[3] - bbox[1] + 1), (0, 0, 0, 0)
        )
        ImageDraw.Draw(text_img).text(
            (-bbox[0], -bbox[1]), item.text, font=font, fill=self.text_color
        )
        if item.rotation:
            text_img = text_img.rotate(item.rotation, expand=True)

        cx, cy = to_px(item.cx, item.cy)
        img.paste(
            text_img,
            (cx - text_img.width // 2, cy - text_img.height // 2),
            text_img,
        )


def render_to_png(
    layout: PinoutLayout, output_path: str = "pinout.png", **kwargs
) -> str:
    """
    Convenience function to render a pinout layout to PNG.

    Args:
        layout: Computed pinout layout
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.render(layout, output_path)

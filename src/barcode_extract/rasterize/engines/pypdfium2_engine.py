from __future__ import annotations

from pathlib import Path

from ...contracts import Size
from ...errors import EngineNotInstalledError
from .base import DocumentInfo, EngineRenderedPage, PageGeometry, RasterizerEngine


class Pypdfium2Rasterizer(RasterizerEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise EngineNotInstalledError(
                "Missing dependency: pypdfium2 is required for PDF rendering."
            ) from e

    def read_document_info(self, *, pdf_file: Path) -> DocumentInfo:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        try:
            pages: dict[int, PageGeometry] = {}
            for i in range(len(doc)):
                page = doc[i]
                width, height = page.get_size()
                pages[i + 1] = PageGeometry(
                    layout_size=Size(width=float(width), height=float(height)),
                    rotation=float(page.get_rotation()),
                )
            title = (doc.get_metadata_dict().get("Title") or "").strip() or None
            return DocumentInfo(page_count=len(doc), pages=pages, title=title)
        finally:
            doc.close()

    def render_pages(
        self,
        *,
        pdf_file: Path,
        out_dir: Path,
        pages: list[int],
        long_side_px: int,
    ) -> list[EngineRenderedPage]:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        page_count = len(doc)

        out_dir.mkdir(parents=True, exist_ok=True)

        rendered: list[EngineRenderedPage] = []
        try:
            for page_num in pages:
                if page_num < 1 or page_num > page_count:
                    raise ValueError(f"Page out of range: {page_num} (1..{page_count})")

                page = doc[page_num - 1]
                width, height = page.get_size()
                # Scale so the long side hits the target size, independent of the page's point size.
                scale = long_side_px / max(width, height)
                bitmap = page.render(scale=scale)

                pil_img = bitmap.to_pil().convert("RGB")
                width_px, height_px = pil_img.size
                out_file = out_dir / f"page_{page_num:03d}.png"
                pil_img.save(out_file, format="PNG")

                rendered.append(
                    EngineRenderedPage(
                        page_num=page_num,
                        image_file=out_file,
                        width_px=int(width_px),
                        height_px=int(height_px),
                    )
                )
        finally:
            doc.close()
        return rendered

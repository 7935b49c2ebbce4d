"""Convert decoded frames into Qt images."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap, qRgb

from thememgr.core.models import DecodedBitmap

_BACKGROUND = qRgb(255, 142, 30)
_FOREGROUND = qRgb(0, 0, 0)


def bitmap_to_qimage(bitmap: DecodedBitmap) -> QImage:
    """Build a MonoLSB image that owns a copy of the bitmap data."""
    image = QImage(
        bitmap.data,
        bitmap.width,
        bitmap.height,
        bitmap.row_stride,
        QImage.Format.Format_MonoLSB,
    )
    image.setColorTable([_BACKGROUND, _FOREGROUND])
    return image.copy()


def bitmap_to_pixmap(bitmap: DecodedBitmap, scale: int = 2) -> QPixmap:
    image = bitmap_to_qimage(bitmap)
    if scale > 1:
        image = image.scaled(
            bitmap.width * scale,
            bitmap.height * scale,
            Qt.AspectRatioMode.IgnoreAspectRatio,
            Qt.TransformationMode.FastTransformation,
        )
    return QPixmap.fromImage(image)

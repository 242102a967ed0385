"""갤러리 이미지 검증/변환 서비스입니다. 업로드 원본을 WebP 원본/대/중/썸네일로 저장합니다."""

import io
import logging
import os
from typing import Dict, Iterable, Optional, Tuple

from fastapi import HTTPException
from PIL import Image, ImageOps, UnidentifiedImageError

from app.config import settings
from app.utils.helpers import unique_basename, upload_folder, upload_url, url_to_upload_path

logger = logging.getLogger(__name__)

GALLERY_FOLDER = "gallery"
RENDITIONS = {
    "thumbnail": (200, 200),
    "medium": (800, 600),
    "large": (1920, 1080),
}


def _open(content: bytes, load: bool = True) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(content))
        if load:
            img.load()
    except Image.DecompressionBombError:
        raise HTTPException(status_code=400, detail="Image dimensions are too large")
    except (UnidentifiedImageError, OSError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid image file: {exc}")
    return img


def validate_image(content: bytes) -> Tuple[int, int]:
    if len(content) > settings.MAX_IMAGE_SIZE:
        limit_mb = settings.MAX_IMAGE_SIZE // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File exceeds {limit_mb} MB limit")
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    # 헤더의 크기만 먼저 확인하고, 범위 안일 때만 픽셀을 디코딩한다.
    img = _open(content, load=False)
    width, height = img.size
    low, high = settings.IMAGE_MIN_DIMENSION, settings.IMAGE_MAX_DIMENSION
    if width < low or height < low:
        raise HTTPException(status_code=400, detail=f"Image must be at least {low}x{low} pixels")
    if width > high or height > high:
        raise HTTPException(status_code=400, detail=f"Image must be at most {high}x{high} pixels")
    try:
        img.load()
    except (Image.DecompressionBombError, OSError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid image file: {exc}")
    return width, height


def _normalize(img: Image.Image) -> Image.Image:
    # EXIF 회전 반영 후 메타데이터 없이 다시 그린다.
    img = ImageOps.exif_transpose(img)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "A" in img.getbands() or img.mode == "P" else "RGB")
    return img


def _save_webp(img: Image.Image, rendition: str, basename: str, quality: int) -> str:
    subfolder = f"{GALLERY_FOLDER}/{rendition}"
    folder = upload_folder(subfolder)
    filename = f"{basename}.webp"
    img.save(os.path.join(folder, filename), format="WEBP", quality=quality)
    return upload_url(subfolder, filename)


def _renditions(img: Image.Image, basename: str) -> Dict[str, str]:
    urls = {}
    for name, size in RENDITIONS.items():
        if name == "thumbnail":
            resized = ImageOps.fit(img, size, method=Image.Resampling.LANCZOS)
        else:
            resized = img.copy()
            resized.thumbnail(size, Image.Resampling.LANCZOS)
        urls[name] = _save_webp(resized, name, basename, settings.IMAGE_WEBP_QUALITY)
    return urls


def process_image(content: bytes) -> Dict[str, object]:
    img = _normalize(_open(content))
    basename = unique_basename()
    urls = {"original": _save_webp(img, "original", basename, 90)}
    urls.update(_renditions(img, basename))
    logger.info("[image] processed %s (%sx%s)", basename, img.width, img.height)
    return {
        "original_url": urls["original"],
        "thumbnail_url": urls["thumbnail"],
        "medium_url": urls["medium"],
        "file_url": urls["large"],
        "file_type": "image/webp",
        "width": img.width,
        "height": img.height,
    }


def regenerate_renditions(original_url: str) -> Dict[str, str]:
    """저장된 원본에서 파생 이미지를 다시 만든다."""
    path = url_to_upload_path(original_url)
    if not path or not os.path.exists(path):
        raise FileNotFoundError(f"original image not found: {original_url}")
    basename = os.path.splitext(os.path.basename(path))[0]
    with Image.open(path) as img:
        img.load()
        urls = _renditions(_normalize(img), basename)
    return {
        "thumbnail_url": urls["thumbnail"],
        "medium_url": urls["medium"],
        "file_url": urls["large"],
    }


def optimize(url: str, quality: Optional[int] = None) -> int:
    path = url_to_upload_path(url)
    if not path or not os.path.exists(path):
        raise FileNotFoundError(f"image not found: {url}")
    before = os.path.getsize(path)
    with Image.open(path) as img:
        img.load()
        img.save(path, format="WEBP", quality=quality or settings.IMAGE_WEBP_QUALITY, method=6)
    after = os.path.getsize(path)
    return before - after


def delete_files(urls: Iterable[Optional[str]]) -> int:
    removed = 0
    for url in urls:
        path = url_to_upload_path(url)
        if not path:
            continue
        try:
            os.remove(path)
            removed += 1
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.warning("[image] failed to delete %s: %s", path, exc)
    return removed

from pydantic import BaseModel, ConfigDict, Field


class CompressionResult(BaseModel):
    """نتيجة ضغط صورة واحدة كما تُعاد للعميل."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    compressed_image_url: str = Field(..., alias="compressedImageUrl", description="الرابط العام للصورة المضغوطة.")
    original_size: int = Field(..., alias="originalSize", ge=0, description="حجم الصورة الأصلية بالبايت.")
    compressed_size: int = Field(..., alias="compressedSize", ge=0, description="حجم الصورة بعد الضغط بالبايت.")
    compression_ratio: float = Field(
        ...,
        alias="compressionRatio",
        description="نسبة التوفير المئوية، قد تكون سالبة إذا كبر حجم الملف.",
    )
    quality: int = Field(..., ge=1, le=100, description="الجودة المستخدمة فعليًا.")

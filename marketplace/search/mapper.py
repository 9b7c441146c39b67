from marketplace.catalog import DEFAULT_CATEGORY_LABEL, EMERGENCY_TAG, VERIFIED_TAG
from marketplace.media import to_media_items
from marketplace.models import Profile, ServiceType
from marketplace.schemas.response import Professional


def _enum_value(value) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def _build_tags(profile: Profile) -> list[str]:
    tags = []
    if profile.is_verified:
        tags.append(VERIFIED_TAG)
    if profile.service_type == ServiceType.EMERGENCY:
        tags.append(EMERGENCY_TAG)
    return tags


def resolve_gallery(profile: Profile) -> list[str]:
    """Full media list, else the avatar alone, else nothing."""
    if profile.media_urls:
        return list(profile.media_urls)
    if profile.avatar_url:
        return [profile.avatar_url]
    return []


def profile_to_professional(profile: Profile) -> Professional:
    """Convert a stored profile into its render-ready view model."""
    gallery = resolve_gallery(profile)
    media = to_media_items(gallery)
    video_url = next((item.url for item in media if item.is_video), None)
    categories = list(profile.categories or [])

    return Professional(
        id=profile.id,
        name=profile.business_name,
        category=categories[0] if categories else DEFAULT_CATEGORY_LABEL,
        categories=categories,
        city=profile.city,
        rating=profile.rating or 0.0,
        reviews=profile.review_count or 0,
        description=profile.description or "",
        is_verified=profile.is_verified,
        tags=_build_tags(profile),
        avatar_url=profile.avatar_url,
        has_video=video_url is not None,
        video_url=video_url,
        service_type=_enum_value(profile.service_type),
        gender=_enum_value(profile.gender),
        community=profile.community,
        gallery=gallery,
        media=media,
    )

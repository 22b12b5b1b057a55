"""Record to content entry mappers."""

from tap2go.content.cms.schemas import (
    Author,
    BlogPostAttributes,
    BlogPostEntry,
    HomepageBannerAttributes,
    HomepageBannerEntry,
    MenuCategoryAttributes,
    MenuCategoryEntry,
    MenuItemAttributes,
    MenuItemEntry,
    PromotionAttributes,
    PromotionEntry,
    RestaurantContentAttributes,
    RestaurantContentEntry,
    StaticPageAttributes,
    StaticPageEntry,
)
from tap2go.content.models import (
    BlogPostRecord,
    HomepageBannerRecord,
    MenuCategoryRecord,
    MenuItemRecord,
    PromotionRecord,
    RestaurantContentRecord,
    StaticPageRecord,
)


def restaurant_content_entry(record: RestaurantContentRecord) -> RestaurantContentEntry:
    return RestaurantContentEntry(
        id=record.id,
        attributes=RestaurantContentAttributes(
            external_id=record.firebase_id,
            slug=record.slug,
            story=record.story,
            long_description=record.long_description,
            hero_image=record.hero_image_url,
            gallery=record.gallery_images,
            awards=record.awards,
            certifications=record.certifications,
            special_features=record.special_features,
            social_media=record.social_media,
            seo=record.seo_data,
            is_published=record.is_published,
            published_at=record.published_at,
            updated_at=record.updated_at,
        ),
    )


def menu_category_entry(record: MenuCategoryRecord) -> MenuCategoryEntry:
    return MenuCategoryEntry(
        id=record.id,
        attributes=MenuCategoryAttributes(
            external_id=record.firebase_id,
            restaurant_id=record.restaurant_firebase_id,
            name=record.name,
            description=record.description,
            image=record.image_url,
            sort_order=record.sort_order,
            is_active=record.is_active,
        ),
    )


def menu_item_entry(record: MenuItemRecord) -> MenuItemEntry:
    return MenuItemEntry(
        id=record.id,
        attributes=MenuItemAttributes(
            external_id=record.firebase_id,
            category_id=record.category_firebase_id,
            restaurant_id=record.restaurant_firebase_id,
            name=record.name,
            detailed_description=record.detailed_description,
            short_description=record.short_description,
            images=record.images,
            ingredients=record.ingredients,
            allergens=record.allergens,
            nutritional_info=record.nutritional_info,
            preparation_steps=record.preparation_steps,
            chef_notes=record.chef_notes,
            tags=record.tags,
            is_vegetarian=record.is_vegetarian,
            is_vegan=record.is_vegan,
            is_gluten_free=record.is_gluten_free,
            spice_level=record.spice_level,
            preparation_time=record.preparation_time,
            seo=record.seo_data,
            is_published=record.is_published,
        ),
    )


def blog_post_entry(record: BlogPostRecord) -> BlogPostEntry:
    return BlogPostEntry(
        id=record.id,
        attributes=BlogPostAttributes(
            title=record.title,
            slug=record.slug,
            content=record.content,
            excerpt=record.excerpt,
            featured_image=record.featured_image_url,
            author=Author(
                name=record.author_name,
                bio=record.author_bio,
                avatar=record.author_avatar_url,
            ),
            categories=record.categories,
            tags=record.tags,
            related_restaurants=record.related_restaurants,
            reading_time=record.reading_time,
            is_published=record.is_published,
            is_featured=record.is_featured,
            seo=record.seo_data,
            published_at=record.published_at,
        ),
    )


def promotion_entry(record: PromotionRecord) -> PromotionEntry:
    return PromotionEntry(
        id=record.id,
        attributes=PromotionAttributes(
            title=record.title,
            description=record.description,
            short_description=record.short_description,
            image=record.image_url,
            banner_image=record.banner_image_url,
            promotion_type=record.promotion_type,
            discount_type=record.discount_type,
            discount_value=record.discount_value,
            minimum_order_value=record.minimum_order_value,
            valid_from=record.valid_from,
            valid_until=record.valid_until,
            is_active=record.is_active,
            target_restaurants=record.target_restaurants,
            target_categories=record.target_categories,
            target_menu_items=record.target_menu_items,
            max_usage_per_user=record.max_usage_per_user,
            total_usage_limit=record.total_usage_limit,
            current_usage_count=record.current_usage_count,
            promo_code=record.promo_code,
            terms=record.terms,
            seo=record.seo_data,
        ),
    )


def static_page_entry(record: StaticPageRecord) -> StaticPageEntry:
    return StaticPageEntry(
        id=record.id,
        attributes=StaticPageAttributes(
            title=record.title,
            slug=record.slug,
            content=record.content,
            excerpt=record.excerpt,
            is_published=record.is_published,
            show_in_navigation=record.show_in_navigation,
            navigation_order=record.navigation_order,
            seo=record.seo_data,
            published_at=record.published_at,
        ),
    )


def homepage_banner_entry(record: HomepageBannerRecord) -> HomepageBannerEntry:
    return HomepageBannerEntry(
        id=record.id,
        attributes=HomepageBannerAttributes(
            title=record.title,
            subtitle=record.subtitle,
            description=record.description,
            image=record.image_url,
            mobile_image=record.mobile_image_url,
            cta_text=record.cta_text,
            cta_link=record.cta_link,
            sort_order=record.sort_order,
            show_on_mobile=record.show_on_mobile,
            show_on_desktop=record.show_on_desktop,
            start_date=record.start_date,
            end_date=record.end_date,
        ),
    )

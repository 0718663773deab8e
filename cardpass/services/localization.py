"""
System translations for wallet passes.

Maps system-generated strings to supported locales.
Merchant-provided content (titles, reward text, branch names) is passed
through untranslated.
"""

SUPPORTED_LOCALES = ("en", "ar")

# System strings used in pass generation (not editable by businesses)
_SYSTEM_STRINGS: dict[str, dict[str, str]] = {
    "progress_label": {
        "en": "Progress",
        "ar": "التقدم",
    },
    "progress_value": {
        "en": "{count} of {total}",
        "ar": "{count} من {total}",
    },
    "progress_stamps_body": {
        "en": "{count} of {total} stamps",
        "ar": "{count} من {total} أختام",
    },
    "points_label": {
        "en": "Points",
        "ar": "النقاط",
    },
    "stamps_collected_label": {
        "en": "Stamps Collected",
        "ar": "الأختام المجمعة",
    },
    "reward_label": {
        "en": "Reward",
        "ar": "المكافأة",
    },
    "default_reward": {
        "en": "Free Item",
        "ar": "منتج مجاني",
    },
    "location_label": {
        "en": "Location",
        "ar": "الموقع",
    },
    "valid_at_label": {
        "en": "Valid At",
        "ar": "صالح في",
    },
    "all_locations": {
        "en": "All Locations",
        "ar": "جميع الفروع",
    },
    "member_since_label": {
        "en": "Member Since",
        "ar": "عضو منذ",
    },
    "expires_label": {
        "en": "Expires",
        "ar": "ينتهي",
    },
    "never_expires": {
        "en": "Never",
        "ar": "أبداً",
    },
    "completed_label": {
        "en": "Completed",
        "ar": "مكتمل",
    },
    "completed_value": {
        "en": "{count}x",
        "ar": "{count}x",
    },
    "tier_label": {
        "en": "Tier",
        "ar": "المستوى",
    },
    "reward_ready": {
        "en": "Reward ready!",
        "ar": "المكافأة جاهزة!",
    },
    "rewards_ready": {
        "en": "{count} rewards ready!",
        "ar": "{count} مكافآت جاهزة!",
    },
    "stamps_remaining": {
        "en": "{count} more stamps until reward",
        "ar": "{count} أختام متبقية للمكافأة",
    },
    "customer_label": {
        "en": "Customer",
        "ar": "العميل",
    },
    "customer_id_label": {
        "en": "Customer ID",
        "ar": "رقم العميل",
    },
    "customer_id_alt_text": {
        "en": "Customer ID: {customer_id}",
        "ar": "رقم العميل: {customer_id}",
    },
    "scan_to_update": {
        "en": "Scan to update loyalty progress",
        "ar": "امسح لتحديث تقدم الولاء",
    },
    "offer_details_label": {
        "en": "Offer Details",
        "ar": "تفاصيل العرض",
    },
    "terms_label": {
        "en": "Terms & Conditions",
        "ar": "الشروط والأحكام",
    },
    "terms_value": {
        "en": "Valid at participating locations. Cannot be combined with other offers. Subject to availability.",
        "ar": "صالح في الفروع المشاركة. لا يمكن دمجه مع عروض أخرى. حسب التوفر.",
    },
    "loyalty_card_description": {
        "en": "{business} Loyalty Card",
        "ar": "بطاقة ولاء {business}",
    },
    "nearby_relevant_text": {
        "en": "{business} nearby - Show your loyalty card!",
        "ar": "{business} قريب منك - اعرض بطاقة الولاء!",
    },
    "logo_content_description": {
        "en": "{business} Logo",
        "ar": "شعار {business}",
    },
    "hero_content_description": {
        "en": "{business} Loyalty Program",
        "ar": "برنامج ولاء {business}",
    },
    "view_account": {
        "en": "View Account",
        "ar": "عرض الحساب",
    },
    "call_business": {
        "en": "Call Business",
        "ar": "اتصل بالنشاط التجاري",
    },
    "business_website": {
        "en": "Business Website",
        "ar": "موقع النشاط التجاري",
    },
}


def get_system_string(key: str, locale: str, **kwargs: str | int) -> str:
    """Return a translated system string with placeholder substitution.

    Falls back to English if the locale or key is not found.
    """
    strings = _SYSTEM_STRINGS.get(key, {})
    template = strings.get(locale) or strings.get("en", key)
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        return template

"""
Static catalog data: categories, communities, service types and the ad pool.
"""
from pydantic import BaseModel

from marketplace.models import ServiceType

# Synthetic service-type filter covering every non-retail interaction mode
SERVICES_AGGREGATE = "services"
SERVICES_AGGREGATE_TYPES = [
    ServiceType.APPOINTMENT,
    ServiceType.PROJECT,
    ServiceType.EMERGENCY,
]

DEFAULT_CATEGORY_LABEL = "כללי"
VERIFIED_TAG = "מאומת"
EMERGENCY_TAG = "זמין 24/6"

SERVICE_TYPE_LABELS = {
    SERVICES_AGGREGATE: "נותני שירות",
    ServiceType.APPOINTMENT.value: "קביעת תור",
    ServiceType.PROJECT.value: "פרויקטים",
    ServiceType.EMERGENCY.value: "חירום 24/6",
    ServiceType.RETAIL.value: "קניות ומסחר",
}


class Category(BaseModel):
    id: str
    name: str
    icon: str
    description: str


class Community(BaseModel):
    id: str
    label: str
    category: str


class Ad(BaseModel):
    id: str
    title: str
    description: str
    image_url: str
    link_url: str
    placement: str
    advertiser_name: str | None = None


CATEGORIES = [
    Category(id="plumbers", name="אינסטלטורים", icon="🔧", description="אינסטלציה, צנרת, ביוב"),
    Category(id="electricians", name="חשמלאים", icon="⚡", description="חשמל, תאורה, לוחות חשמל"),
    Category(id="renovations", name="שיפוצים", icon="🏠", description="שיפוצים, בניה, קבלנות"),
    Category(id="painting", name="צביעה", icon="🎨", description="צביעה, טפטים, גבס"),
    Category(id="aircon", name="מיזוג אוויר", icon="❄️", description="מזגנים, התקנה, תיקון"),
    Category(id="cleaning", name="ניקיון", icon="🧹", description="ניקיון בתים, משרדים"),
    Category(id="food", name="מזון", icon="🍕", description="מסעדות, קייטרינג, מזון מוכן"),
    Category(id="education", name="לימוד", icon="📚", description="שיעורים פרטיים, עזרה בלימודים"),
    Category(id="events", name="אירועים", icon="🎉", description="אולמות, הפקות, שירותי אירועים"),
    Category(id="photography", name="צילום", icon="📸", description="צילום, וידאו, עריכה"),
    Category(id="lawyers", name="עורכי דין", icon="⚖️", description="ייעוץ משפטי, ליווי משפטי"),
    Category(id="accountants", name="רואי חשבון", icon="📊", description="הנהלת חשבונות, מיסים"),
    Category(id="computers", name="מחשבים", icon="💻", description="תיקון מחשבים, IT, תוכנה"),
    Category(id="moving", name="הובלות", icon="🚚", description="הובלות, העברות דירה"),
    Category(id="garage", name="מוסך", icon="🚗", description="תיקון רכב, טיפולים"),
    Category(id="fashion", name="ביגוד", icon="👔", description="חנויות בגדים, תפירה"),
    Category(id="hair", name="טיפולי שיער", icon="💇", description="ספרים, עיצוב שיער, פאות"),
    Category(id="health", name="רפואה", icon="🏥", description="רופאים, מטפלים, קליניקות"),
    Category(id="translation", name="תרגום", icon="🌐", description="תרגום מסמכים, שפות"),
    Category(id="webdev", name="בניית אתרים ודפי נחיתה", icon="🌐", description="בניית אתרים, דפי נחיתה"),
]

COMMUNITIES = [
    Community(id="general", label="כללי / ללא שיוך", category="sector"),
    Community(id="chabad", label='חב"ד', category="movement"),
    Community(id="breslov", label="ברסלב", category="movement"),
    Community(id="gur", label="גור", category="hasidut"),
    Community(id="belz", label="בעלז", category="hasidut"),
    Community(id="vizhnitz", label="ויז'ניץ", category="hasidut"),
    Community(id="sanz", label="צאנז", category="hasidut"),
    Community(id="satmar", label="סאטמר", category="hasidut"),
    Community(id="edah_haredit", label="העדה החרדית", category="sector"),
    Community(id="other", label="אחר", category="other"),
]

ADS = [
    Ad(
        id="1",
        title="הלוואות לכל מטרה",
        description="ריביות אטרקטיביות ופריסת תשלומים נוחה.",
        image_url="https://images.unsplash.com/photo-1579621970563-ebec7560ff3e?w=800",
        link_url="#",
        placement="sidebar",
        advertiser_name="בנק הקהילה",
    ),
    Ad(
        id="2",
        title="ריהוט יוקרה לבית",
        description="מבצעי סוף שנה על כל מחלקת הסלונים. משלוח חינם!",
        image_url="https://images.unsplash.com/photo-1555041469-a586c61ea9bc?w=800",
        link_url="#",
        placement="feed",
        advertiser_name="רהיטי פאר",
    ),
    Ad(
        id="3",
        title="ביטוח משכנתא",
        description="ההצעה המשתלמת ביותר בשוק. בדקו אותנו.",
        image_url="https://images.unsplash.com/photo-1450101499163-c8848c66ca85?w=800",
        link_url="#",
        placement="sidebar",
        advertiser_name="ביטוח ישיר",
    ),
    Ad(
        id="4",
        title="קורס תכנות",
        description="הכשרה מעשית והשמה בחברות מובילות. מסלול ערב.",
        image_url="https://images.unsplash.com/photo-1587620962725-abab7fe55159?w=800",
        link_url="#",
        placement="feed",
        advertiser_name="TechCode",
    ),
]

FEED_ADS = [ad for ad in ADS if ad.placement == "feed"]

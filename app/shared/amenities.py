"""Amenity catalogue shared by listings, search and saved searches"""

AMENITIES = [
    {"id": "pool", "label": "Swimming Pool", "icon": "🏊"},
    {"id": "gym", "label": "Gym/Fitness Center", "icon": "💪"},
    {"id": "parking", "label": "Parking", "icon": "🅿️"},
    {"id": "ac", "label": "Air Conditioning", "icon": "❄️"},
    {"id": "heating", "label": "Heating", "icon": "🔥"},
    {"id": "laundry", "label": "Laundry", "icon": "🧺"},
    {"id": "dishwasher", "label": "Dishwasher", "icon": "🍽️"},
    {"id": "balcony", "label": "Balcony/Patio", "icon": "🏡"},
    {"id": "garden", "label": "Garden", "icon": "🌳"},
    {"id": "garage", "label": "Garage", "icon": "🚗"},
    {"id": "security", "label": "Security System", "icon": "🔒"},
    {"id": "elevator", "label": "Elevator", "icon": "🛗"},
    {"id": "concierge", "label": "Concierge", "icon": "🎩"},
    {"id": "theater", "label": "Home Theater", "icon": "🎬"},
    {"id": "sauna", "label": "Sauna", "icon": "🧖"},
    {"id": "wifi", "label": "WiFi Ready", "icon": "📶"},
]

_BY_ID = {amenity["id"]: amenity for amenity in AMENITIES}


def get_amenity_label(amenity_id: str) -> str:
    amenity = _BY_ID.get(amenity_id)
    return amenity["label"] if amenity else amenity_id


def get_amenity_icon(amenity_id: str) -> str:
    amenity = _BY_ID.get(amenity_id)
    return amenity["icon"] if amenity else "✨"

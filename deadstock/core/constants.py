EGYPT_CITIES = tuple(
    sorted(
        (
            "Cairo", "Giza", "Alexandria", "Dakahlia", "Red Sea", "Beheira",
            "Fayoum", "Gharbia", "Ismailia", "Monufia", "Minya", "Qalyubia",
            "New Valley", "Sharqia", "Suez", "Aswan", "Assiut", "Beni Suef",
            "Port Said", "Damietta", "South Sinai", "Kafr El Sheikh", "Matrouh",
            "Luxor", "Qena", "North Sinai", "Sohag",
        )
    )
)

ACTIVITY_KINDS = ("offer", "request")

SESSION_PHARMACY_ID = "pharmacy_id"
SESSION_PHARMACY_PROFILE = "pharmacy_profile"
SESSION_TEMP_PHARMACY_ID = "temp_pharmacy_id"
DEFAULT_SESSION_KEY = "default"
SESSION_KEY_HEADER = "X-Session-Key"

SOLD_STATUS = "sold"
PROFILE_PATH = "/profile"

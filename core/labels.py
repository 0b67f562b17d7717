# core/labels.py
"""Indonesian display labels, kept out of the ORM models."""

UNKNOWN_LABEL = "Tidak Diketahui"

APAR_TYPE_LABELS = {
    "powder": "Bubuk",
    "co2": "CO2",
    "foam": "Busa",
    "liquid": "Cair",
}

APAR_STATUS_LABELS = {
    "active": "Aktif",
    "inactive": "Tidak Aktif",
    "expired": "Kadaluarsa",
    "maintenance": "Pemeliharaan",
}

OVERALL_STATUS_LABELS = {
    "good": "Baik",
    "needs_attention": "Perlu Perhatian",
    "critical": "Kritis",
}

ITEM_TYPE_LABELS = {
    "hose": "Selang",
    "safety_pin": "Pin Pengaman",
    "content": "Isi Tabung",
    "handle": "Pegangan",
    "pressure": "Tekanan Gas",
    "funnel": "Corong Bawah",
    "cleanliness": "Kebersihan",
}

ITEM_STATUS_LABELS = {
    "good": "Baik",
    "damaged": "Rusak",
    "needs_repair": "Perlu Perbaikan",
}

ROLE_LABELS = {
    "admin": "Administrator",
    "petugas": "Petugas",
}


def label_for(table: dict[str, str], value: str | None) -> str:
    return table.get(value, UNKNOWN_LABEL) if value is not None else UNKNOWN_LABEL


def apar_type_label(value: str | None) -> str:
    return label_for(APAR_TYPE_LABELS, value)


def apar_status_label(value: str | None) -> str:
    return label_for(APAR_STATUS_LABELS, value)


def overall_status_label(value: str | None) -> str:
    return label_for(OVERALL_STATUS_LABELS, value)


def item_type_label(value: str | None) -> str:
    return label_for(ITEM_TYPE_LABELS, value)


def item_status_label(value: str | None) -> str:
    return label_for(ITEM_STATUS_LABELS, value)


def item_status_icon(value: str | None) -> str:
    if value == "good":
        return "✔"
    if value in ("damaged", "needs_repair"):
        return "✘"
    return "?"


def role_label(value: str | None) -> str:
    # Anything that is not an admin is shown as an officer
    return ROLE_LABELS["admin"] if value == "admin" else ROLE_LABELS["petugas"]

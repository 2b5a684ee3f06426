"""
Seed script for local testing of the verification console.
Writes a small student list to STUDENT_SOURCE_PATH.

Usage:
    python -m core.seed_local
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from settings import get_settings
from adapters.json import JsonStudentStore
from models.converters import students_from_rows

# Sample artifacts (publicly accessible)
SAMPLE_PDF = "https://arxiv.org/pdf/1706.03762.pdf"
SAMPLE_IMAGE = "https://picsum.photos/seed/kk/800/600"

SAMPLE_STUDENTS = [
    {
        "id": "s-001",
        "fullName": "Ana Lestari",
        "className": "VII A",
        "nisn": "0101010101",
        "nis": "2401",
        "birthPlace": "Bandung",
        "birthDate": "2012-04-01",
        "address": "Jl. Melati 3",
        "subDistrict": "Coblong",
        "father": {"name": "Budi Santoso", "nik": "3273010101700001"},
        "mother": {"name": "Citra Dewi", "nik": "3273014101750002"},
        "dapodik": {"rt": "01", "rw": "04", "kelurahan": "Dago", "skhun": "DN-01-123"},
        "documents": [
            {"id": "d-1", "category": "KK", "name": "kk_ana.jpg", "type": "IMAGE", "url": SAMPLE_IMAGE, "status": "PENDING"},
            {"id": "d-2", "category": "IJAZAH", "name": "ijazah_ana.pdf", "type": "PDF", "url": SAMPLE_PDF, "status": "PENDING"},
        ],
    },
    {
        "id": "s-002",
        "fullName": "Bayu Pratama",
        "className": "VII A",
        "father": {"name": "Dedi"},
        "documents": [
            {"id": "d-3", "category": "AKTA", "name": "akta_bayu.jpg", "type": "IMAGE", "url": SAMPLE_IMAGE, "status": "REVISION", "adminNote": "Foto buram"},
        ],
    },
    {
        "id": "s-003",
        "fullName": "Citra Ayu",
        "className": "VIII A",
        "documents": [],
    },
]


def seed():
    """Write sample students to the configured student file."""
    print("🌱 Seeding students...")

    settings = get_settings()
    store = JsonStudentStore(settings.student_source_path)
    if store.students:
        print(f"⚠️  {settings.student_source_path} already has {len(store.students)} students; not overwriting")
        return

    store.students.extend(students_from_rows(SAMPLE_STUDENTS))
    store.notify(store.students[0])
    print(f"✅ Wrote {len(store.students)} students to {settings.student_source_path}")


if __name__ == "__main__":
    seed()

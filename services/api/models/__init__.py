from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DocumentCategory(str, Enum):
    IJAZAH = "IJAZAH"        # primary school diploma
    AKTA = "AKTA"            # birth certificate
    KK = "KK"                # family card
    KTP_AYAH = "KTP_AYAH"    # father's ID card
    KTP_IBU = "KTP_IBU"      # mother's ID card
    KIP = "KIP"              # welfare card (KIP / PKH)
    SKL = "SKL"              # graduation letter
    FOTO = "FOTO"            # passport photo


# Display order of the document-type selector
CATEGORY_LABELS: Dict[DocumentCategory, str] = {
    DocumentCategory.IJAZAH: "Ijazah SD",
    DocumentCategory.AKTA: "Akta Kelahiran",
    DocumentCategory.KK: "Kartu Keluarga",
    DocumentCategory.KTP_AYAH: "KTP Ayah",
    DocumentCategory.KTP_IBU: "KTP Ibu",
    DocumentCategory.KIP: "KIP / PKH",
    DocumentCategory.SKL: "Surat Ket. Lulus",
    DocumentCategory.FOTO: "Pas Foto",
}


class DocumentStatus(str, Enum):
    UNSUBMITTED = "UNSUBMITTED"   # synthetic: no Document for the category
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REVISION = "REVISION"


class ArtifactKind(str, Enum):
    IMAGE = "IMAGE"
    PDF = "PDF"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Document(_CamelModel):
    """
    One uploaded verification artifact of a student.

    Only `status` and `admin_note` are ever written by the review console.
    """
    id: str
    category: DocumentCategory
    name: str = ""
    kind: ArtifactKind = Field(ArtifactKind.IMAGE, alias="type")
    url: str = ""
    status: DocumentStatus = DocumentStatus.PENDING
    admin_note: Optional[str] = None

    @property
    def is_paginated(self) -> bool:
        return self.kind == ArtifactKind.PDF or self.name.lower().endswith(".pdf")


class Student(_CamelModel):
    """
    Enrollment record (buku induk) of a student.

    The record is semi-structured: extra keys are kept, and the nested groups
    are free-form mappings so that in-place edits may add new structure.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    full_name: str = ""
    class_name: str = ""

    nisn: Optional[str] = None
    nis: Optional[str] = None
    birth_place: Optional[str] = None
    birth_date: Optional[str] = None
    diploma_number: Optional[str] = None
    address: Optional[str] = None
    sub_district: Optional[str] = None

    father: Optional[Dict[str, Any]] = None
    mother: Optional[Dict[str, Any]] = None
    dapodik: Optional[Dict[str, Any]] = None

    documents: List[Document] = Field(default_factory=list)

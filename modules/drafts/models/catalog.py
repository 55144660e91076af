"""Static catalog of checklists whose drafts are persisted locally.

Adding a new persisted checklist type means adding one descriptor to
``_DESCRIPTORS``; storage keys, area routing and indicator grouping are all
derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

DASHBOARD_PATH = "/dashboard"


def storage_key_for(checklist_id: str) -> str:
    return f"checklist-{checklist_id}-draft"


def is_draft_key(key: Optional[str]) -> bool:
    """True for any key shaped like a checklist draft, catalogued or not."""
    if not key or not (key.startswith("checklist-") and key.endswith("-draft")):
        return False
    return len(key) > len("checklist--draft")


@dataclass(frozen=True)
class ChecklistDescriptor:
    id: str
    display_name: str
    navigation_path: str
    area: str
    storage_key: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.storage_key:
            object.__setattr__(self, "storage_key", storage_key_for(self.id))


@dataclass(frozen=True)
class IncompleteEntry:
    descriptor: ChecklistDescriptor
    key: str

    @property
    def area(self) -> str:
        return self.descriptor.area

    @property
    def display_name(self) -> str:
        return self.descriptor.display_name

    @property
    def navigation_path(self) -> str:
        return self.descriptor.navigation_path


AREAS: Tuple[str, ...] = ("calidad", "produccion", "logistica", "mantencion", "sap")

_DESCRIPTORS: Tuple[ChecklistDescriptor, ...] = (
    # Calidad
    ChecklistDescriptor(
        "envtemp",
        "Process Environmental Temperature Control",
        "/area/calidad/checklist-envtemp",
        "calidad",
    ),
    ChecklistDescriptor(
        "producto-mix",
        "Checklist Mix Producto",
        "/area/calidad/checklist_producto_mix",
        "calidad",
    ),
    ChecklistDescriptor(
        "monoproducto",
        "Checklist Monoproducto",
        "/area/calidad/checklist-monoproducto",
        "calidad",
    ),
    ChecklistDescriptor(
        "metal-detector",
        "Metal Detector (PCC #1)",
        "/area/calidad/checklist-metal-detector",
        "calidad",
    ),
    ChecklistDescriptor(
        "cleanliness-control-packing",
        "Cleanliness Control Packing",
        "/area/calidad/checklist-cleanliness-control-packing",
        "calidad",
    ),
    ChecklistDescriptor(
        "raw-material-quality",
        "Raw Material Quality Report",
        "/area/calidad/checklist-raw-material-quality",
        "calidad",
    ),
    ChecklistDescriptor(
        "foreign-material",
        "Foreign Material Findings Record",
        "/area/calidad/checklist-foreign-material",
        "calidad",
    ),
    ChecklistDescriptor(
        "weighing-sealing",
        "Check weighing and sealing of packaged products",
        "/area/calidad/checklist-weighing-sealing",
        "calidad",
    ),
    ChecklistDescriptor(
        "staff-practices",
        "Staff Good Practices Control",
        "/area/calidad/checklist-staff-practices",
        "calidad",
    ),
    ChecklistDescriptor(
        "staff-glasses-auditory",
        "Process area staff glasses and auditory protector control",
        "/area/calidad/checklist-staff-glasses-auditory",
        "calidad",
    ),
    ChecklistDescriptor(
        "final-product-tasting",
        "Final Product Tasting",
        "/area/calidad/checklist-final-product-tasting",
        "calidad",
    ),
    ChecklistDescriptor(
        "materials-control",
        "Internal control of materials used in production areas",
        "/area/calidad/checklist-materials-control",
        "calidad",
    ),
    ChecklistDescriptor(
        "pre-operational-review",
        "Pre-Operational Review Processing Areas",
        "/area/calidad/checklist-pre-operational-review",
        "calidad",
    ),
    ChecklistDescriptor(
        "footbath-control",
        "Footbath Control",
        "/area/calidad/checklist-footbath-control",
        "calidad",
    ),
    # Produccion
    ChecklistDescriptor(
        "packaging",
        "Checklist de Packaging",
        "/area/produccion/checklist-packaging",
        "produccion",
    ),
    # Logistica
    ChecklistDescriptor(
        "frozen-product-dispatch",
        "Inspection of Frozen Product in Dispatch",
        "/area/logistica/checklist-frozen-product-dispatch",
        "logistica",
    ),
    # Mantencion
    ChecklistDescriptor(
        "solicitud-mtto",
        "Solicitud de Mantenimiento",
        "/area/mantencion/checklist/solicitud_mtto",
        "mantencion",
    ),
    # SAP
    ChecklistDescriptor(
        "sap-nueva",
        "Nueva solicitud SAP",
        "/area/sap/solicitudes/nueva",
        "sap",
    ),
)

def build_catalog(descriptors: Iterable[ChecklistDescriptor]) -> Dict[str, ChecklistDescriptor]:
    """Index descriptors by storage key, rejecting duplicate keys."""
    catalog: Dict[str, ChecklistDescriptor] = {}
    for descriptor in descriptors:
        if descriptor.storage_key in catalog:
            raise ValueError(f"Duplicate checklist storage key: {descriptor.storage_key}")
        catalog[descriptor.storage_key] = descriptor
    return catalog


# storage key -> descriptor, in declaration order
CATALOG: Dict[str, ChecklistDescriptor] = build_catalog(_DESCRIPTORS)


def area_path(area: str) -> str:
    return f"/area/{area}" if area else DASHBOARD_PATH


def descriptor_for_key(
    key: str, catalog: Optional[Dict[str, ChecklistDescriptor]] = None
) -> Optional[ChecklistDescriptor]:
    return (CATALOG if catalog is None else catalog).get(key)


def is_catalog_key(key: Optional[str], catalog: Optional[Dict[str, ChecklistDescriptor]] = None) -> bool:
    return bool(key) and key in (CATALOG if catalog is None else catalog)


def area_path_for_key(key: str, catalog: Optional[Dict[str, ChecklistDescriptor]] = None) -> str:
    """Return the landing page of the area owning ``key``, or the dashboard."""
    descriptor = descriptor_for_key(key, catalog)
    if descriptor is None:
        return DASHBOARD_PATH
    return area_path(descriptor.area)


def descriptors_for_area(
    area: str, catalog: Optional[Dict[str, ChecklistDescriptor]] = None
) -> List[ChecklistDescriptor]:
    source: Iterable[ChecklistDescriptor] = (CATALOG if catalog is None else catalog).values()
    return [d for d in source if d.area == area]


__all__ = [
    "AREAS",
    "CATALOG",
    "DASHBOARD_PATH",
    "ChecklistDescriptor",
    "IncompleteEntry",
    "area_path",
    "area_path_for_key",
    "build_catalog",
    "descriptor_for_key",
    "descriptors_for_area",
    "is_catalog_key",
    "is_draft_key",
    "storage_key_for",
]

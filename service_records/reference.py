"""
Reference Data

Default option lists of the Mamuju Tengah animal health service:
Puskeswan facilities, their officers and villages, livestock types,
case outcomes, priority diseases and the medicine catalog.

The report engine never imports these lists implicitly. Callers build a
ReferenceLists (usually via default_reference()) and pass it to the
exports that need a canonical facility order.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

OTHER_OPTION = 'Lainnya'


def sort_options(options: Iterable[str]) -> List[str]:
    """Sort option labels alphabetically, keeping 'Lainnya' (other) last."""
    return sorted(options, key=lambda option: (option == OTHER_OPTION, option.lower()))


# =============================================================================
# FACILITIES
# =============================================================================

PUSKESWAN_LIST = [
    'Puskeswan Budong-Budong',
    'Puskeswan Karossa',
    'Puskeswan Pangale',
    'Puskeswan Tobadak',
    'Puskeswan Topoyo',
]

OFFICERS_BY_PUSKESWAN = {
    'Puskeswan Budong-Budong': sort_options([
        'Anshari Saleh', 'Suprapto', 'Nur Fauzi', 'Hadi', 'Rahman', 'Tadi Sole', OTHER_OPTION,
    ]),
    'Puskeswan Karossa': sort_options([
        'Asari Rasyid', 'drh. Stephani', 'Basuki Budianto', 'Hasaruddin', 'Nasaruddin', OTHER_OPTION,
    ]),
    'Puskeswan Pangale': sort_options([
        'Kamarudin', 'Kamaruddin', 'drh. Ketut Elok', 'Mansyur', 'Jawaril', 'Sugeng', OTHER_OPTION,
    ]),
    'Puskeswan Tobadak': sort_options([
        'Endang', 'Jupry', 'drh. M Ishak', 'Aser M', OTHER_OPTION,
    ]),
    'Puskeswan Topoyo': sort_options([
        'drh. Iqbal Djamil', 'Alfons B', 'Haslim', 'Fitriani', OTHER_OPTION,
    ]),
}

VILLAGES_BY_PUSKESWAN = {
    'Puskeswan Budong-Budong': sort_options([
        'Babana', 'Barakkang', 'Kire', 'Lumu', 'Pasapa', 'Salumanurung', 'Tinali',
        'Bojo', 'Lembah Hada', 'Salogatta', 'Potantanakayyang', OTHER_OPTION,
    ]),
    'Puskeswan Karossa': sort_options([
        'Benggaulu', 'Kadaila', 'Karossa', 'Kayucalla', 'Kambunong', 'Lara',
        'Lembah Hopo', 'Salubiro', 'Sanjango', 'Sukamaju', 'Tasoskko', 'Mora IV',
        'UPT Lara III', OTHER_OPTION,
    ]),
    'Puskeswan Pangale': sort_options([
        'Kombiling', 'Kuo', 'Lamba-lamba', 'Lemo-Lemo', 'Pangale', 'Polo Camba',
        'Polo Lereng', 'Polo Pangale', 'Sartanamaju', OTHER_OPTION,
    ]),
    'Puskeswan Tobadak': sort_options([
        'Bambadaru', 'Batu Parigi', 'Mahahe', 'Polongaan', 'Saluadak', 'Sejati',
        'Sulobaja', 'Tobadak', OTHER_OPTION,
    ]),
    'Puskeswan Topoyo': sort_options([
        'Bambamanurug', 'Budong-Budong', 'Kabubu', 'Pangalloang', 'Paraili',
        "Salule'bo", 'Salupangkang', 'Salupangkang IV', 'Sinabatta', 'Tabolang',
        'Tangkau', 'Tappilina', 'Topoyo', 'Tumbu', 'Waeputeh', OTHER_OPTION,
    ]),
}


# =============================================================================
# CASES
# =============================================================================

LIVESTOCK_TYPES = [
    'Anjing', 'Anjing Ras', 'Ayam Buras', 'Ayam Domestik', 'Ayam Petelur', 'Babi',
    'Burung', 'Itik', 'Kambing Jawa Randu', 'Kambing Kacang', 'Kambing PE', 'Kerbau',
    'Kucing Bengal', 'Kucing British', 'Kucing Domestik', 'Kucing Himalaya',
    'Kucing MixDom', 'Kucing Persia', 'Kuda', 'Manila', 'Sapi Angus', 'Sapi Bali',
    'Sapi Limosin', 'Sapi Simental', OTHER_OPTION,
]

CASE_STATUS_OPTIONS = ['Sembuh', 'Tidak Sembuh', 'Mati']

PRIORITY_DIAGNOSIS_OPTIONS = sorted([
    'Flu Burung',
    'Rabies',
    'Brucellosis',
    'Penyakit Mulut dan Kuku (PMK)',
    'Jembrana',
    'Lumpy Skin Disease (LSD)',
    'African Swine Fever (ASF)',
    'Anthrax',
])


# =============================================================================
# MEDICINES
# =============================================================================

MEDICINE_CATALOG = {
    'Antibiotik': [
        'Colibact Bolus', 'Duodin', 'Gusanex', 'Interflox', 'Intramox La', 'Kaloxy La',
        'Limoxin La', 'Limoxin Spray', 'Medoxy La', 'Penstrep', 'Proxy Vet La',
        'Sulfastrong', 'Vet Oxy La', 'Vet oxy sb',
    ],
    'Anti Radang Analgesia & Piretik': ['Dexapros', 'Glucortin-20', 'Sulpidon', 'Sulprodon'],
    'Vitamin': [
        'B12', 'B Kompleks', 'B komp bolus', 'Biodin', 'Biopros', 'Calcidex', 'Fertilife',
        'Hematodin', 'Injectamin', 'Pro B Plek', 'Vitol',
    ],
    'Anti Helminthiasis & Ektoparasit': [
        'Fluconix', 'Flukicide', 'Intermectin', 'Ivomec', 'Verm O Bolus', 'Verm O Kaplet',
        'Verm O Pros Bolus', 'Wormectin', 'Wormzole Bolus',
    ],
    'Hormon': ['Capriglandin', 'Intracin', 'Juramate', 'Ovalumon', 'Pgf2@'],
    'Anastesia': ['Ketamine', 'Lidocain'],
    'Sedasi': ['Xylazine'],
    'Antialergi': ['Vetadryl', 'Prodryl'],
    'Antibloat': [],
    'Susu Mineral & As. Amino': [],
}

@dataclass(frozen=True)
class ReferenceLists:
    """
    Option lists handed to the export layer.

    Only `facilities` affects export output: it fixes the order of the
    per-facility sheets. `priority_diagnoses` is what callers pass to
    ServiceStatisticsService. The other lists are carried for callers
    that render selection lists next to a report.
    """
    facilities: Tuple[str, ...]
    officers: Dict[str, List[str]] = field(default_factory=dict)
    villages: Dict[str, List[str]] = field(default_factory=dict)
    priority_diagnoses: Tuple[str, ...] = ()
    livestock_types: Tuple[str, ...] = ()
    case_statuses: Tuple[str, ...] = ()
    medicines: Dict[str, List[str]] = field(default_factory=dict)

    def officers_for(self, facility: str) -> List[str]:
        return list(self.officers.get(facility, []))

    def villages_for(self, facility: str) -> List[str]:
        return list(self.villages.get(facility, []))

    @property
    def medicine_types(self) -> List[str]:
        return list(self.medicines)

    def medicines_for(self, medicine_type: str) -> List[str]:
        return list(self.medicines.get(medicine_type, []))


def default_reference() -> ReferenceLists:
    """Reference lists of the Mamuju Tengah service."""
    return ReferenceLists(
        facilities=tuple(PUSKESWAN_LIST),
        officers={k: list(v) for k, v in OFFICERS_BY_PUSKESWAN.items()},
        villages={k: list(v) for k, v in VILLAGES_BY_PUSKESWAN.items()},
        priority_diagnoses=tuple(PRIORITY_DIAGNOSIS_OPTIONS),
        livestock_types=tuple(LIVESTOCK_TYPES),
        case_statuses=tuple(CASE_STATUS_OPTIONS),
        medicines={k: list(v) for k, v in MEDICINE_CATALOG.items()},
    )

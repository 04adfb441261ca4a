"""Static IBAN country registry (SWIFT IBAN Registry, ISO 13616)."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from utils.logger import logger

# SWIFT notation: n = digits, a = upper-case letters, c = upper-case alphanumeric
_CHAR_CLASSES: Dict[str, str] = {"n": "[0-9]", "a": "[A-Z]", "c": "[A-Z0-9]"}
_FIELD_RE = re.compile(r"^(\d+)([nac]):([a-z_]+)$")


@dataclass(frozen=True)
class BbanField:
    name: str
    kind: str
    length: int

    def __post_init__(self) -> None:
        if self.kind not in _CHAR_CLASSES:
            raise ValueError(f"Unknown character class {self.kind!r} for field {self.name!r}")
        if self.length <= 0:
            raise ValueError(f"Field {self.name!r} must have a positive length")

    @property
    def pattern(self) -> str:
        return f"{_CHAR_CLASSES[self.kind]}{{{self.length}}}"


def parse_layout(layout: str) -> Tuple[BbanField, ...]:
    """
    Parse a compact BBAN layout such as ``"8n:bank 10n:account"``.

    Each token is ``<length><class>:<name>``; tokens are listed in the order
    they appear in the BBAN.
    """
    fields: List[BbanField] = []
    for token in layout.split():
        m = _FIELD_RE.match(token)
        if not m:
            raise ValueError(f"Invalid BBAN layout token: {token!r}")
        fields.append(BbanField(name=m.group(3), kind=m.group(2), length=int(m.group(1))))
    if not fields:
        raise ValueError("BBAN layout is empty")
    return tuple(fields)


@dataclass(frozen=True)
class CountryRecord:
    code: str
    name: str
    currency: str
    is_sepa: bool
    length: int
    fields: Tuple[BbanField, ...]
    example: str = ""
    central_bank_name: str = ""
    central_bank_url: str = ""
    bban_regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[A-Z]{2}", self.code):
            raise ValueError(f"Invalid country code: {self.code!r}")
        expected = 4 + sum(f.length for f in self.fields)
        if self.length != expected:
            raise ValueError(
                f"{self.code}: declared IBAN length {self.length} != 4 + BBAN fields ({expected})"
            )
        if not any(f.name == "bank" for f in self.fields):
            raise ValueError(f"{self.code}: BBAN layout has no bank field")
        pattern = "".join(f"({f.pattern})" for f in self.fields)
        object.__setattr__(self, "bban_regex", re.compile(pattern))

    @property
    def bban_length(self) -> int:
        return self.length - 4

    def matches_bban(self, bban: str) -> bool:
        return self.bban_regex.fullmatch(bban) is not None

    def split_bban(self, bban: str) -> Tuple[str, str, str]:
        """
        Decompose a BBAN into (bank code, branch code, account).

        The account is everything after the last bank/branch field, so
        trailing national check digits stay attached to it.
        """
        m = self.bban_regex.fullmatch(bban)
        if m is None:
            raise ValueError(f"BBAN does not match the {self.code} layout")
        bank: List[str] = []
        branch: List[str] = []
        account_start = 0
        offset = 0
        for f, value in zip(self.fields, m.groups()):
            offset += f.length
            if f.name == "bank":
                bank.append(value)
                account_start = offset
            elif f.name == "branch":
                branch.append(value)
                account_start = offset
        return "".join(bank), "".join(branch), bban[account_start:]


class CountryRegistry:
    """Read-only mapping from ISO 3166 alpha-2 code to CountryRecord."""

    def __init__(self, records: Mapping[str, CountryRecord]) -> None:
        self._records = MappingProxyType(dict(records))

    def get(self, code: str) -> Optional[CountryRecord]:
        return self._records.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._records

    def __iter__(self) -> Iterator[CountryRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def codes(self) -> List[str]:
        return sorted(self._records)

    def sepa_countries(self) -> List[CountryRecord]:
        return [r for r in self if r.is_sepa]


# code, name, ISO 4217 currency, SEPA member, IBAN length, BBAN layout, example IBAN,
# central bank, central bank URL
_REGISTRY_ROWS: List[Tuple[str, str, str, bool, int, str, str, str, str]] = [
    ("AD", "Andorra", "EUR", True, 24, "4n:bank 4n:branch 12c:account", "AD1200012030200359100100", "Institut Nacional Andorrà de Finances", "https://www.inaf.ad"),
    ("AE", "United Arab Emirates", "AED", False, 23, "3n:bank 16n:account", "AE070331234567890123456", "Central Bank of the UAE", "https://www.centralbank.ae"),
    ("AL", "Albania", "ALL", False, 28, "3n:bank 4n:branch 1n:check 16c:account", "AL47212110090000000235698741", "Bank of Albania", "https://www.bankofalbania.org"),
    ("AT", "Austria", "EUR", True, 20, "5n:bank 11n:account", "AT611904300234573201", "Oesterreichische Nationalbank", "https://www.oenb.at"),
    ("AZ", "Azerbaijan", "AZN", False, 28, "4a:bank 20c:account", "AZ21NABZ00000000137010001944", "Central Bank of the Republic of Azerbaijan", "https://www.cbar.az"),
    ("BA", "Bosnia and Herzegovina", "BAM", False, 20, "3n:bank 3n:branch 8n:account 2n:check", "BA391290079401028494", "Central Bank of Bosnia and Herzegovina", "https://www.cbbh.ba"),
    ("BE", "Belgium", "EUR", True, 16, "3n:bank 7n:account 2n:check", "BE68539007547034", "National Bank of Belgium", "https://www.nbb.be"),
    ("BG", "Bulgaria", "EUR", True, 22, "4a:bank 4n:branch 2n:type 8c:account", "BG80BNBG96611020345678", "Bulgarian National Bank", "https://www.bnb.bg"),
    ("BH", "Bahrain", "BHD", False, 22, "4a:bank 14c:account", "BH67BMAG00001299123456", "Central Bank of Bahrain", "https://www.cbb.gov.bh"),
    ("BI", "Burundi", "BIF", False, 27, "5n:bank 5n:branch 11n:account 2n:check", "BI4210000100010000332045181", "Bank of the Republic of Burundi", "https://www.brb.bi"),
    ("BR", "Brazil", "BRL", False, 29, "8n:bank 5n:branch 10n:account 1a:type 1c:owner", "BR1800360305000010009795493C1", "Central Bank of Brazil", "https://www.bcb.gov.br"),
    ("BY", "Belarus", "BYN", False, 28, "4c:bank 4n:account_type 16c:account", "BY13NBRB3600900000002Z00AB00", "National Bank of the Republic of Belarus", "https://www.nbrb.by"),
    ("CH", "Switzerland", "CHF", True, 21, "5n:bank 12c:account", "CH9300762011623852957", "Swiss National Bank", "https://www.snb.ch"),
    ("CR", "Costa Rica", "CRC", False, 22, "4n:bank 14n:account", "CR05015202001026284066", "Central Bank of Costa Rica", "https://www.bccr.fi.cr"),
    ("CY", "Cyprus", "EUR", True, 28, "3n:bank 5n:branch 16c:account", "CY17002001280000001200527600", "Central Bank of Cyprus", "https://www.centralbank.cy"),
    ("CZ", "Czech Republic", "CZK", True, 24, "4n:bank 6n:prefix 10n:account", "CZ6508000000192000145399", "Czech National Bank", "https://www.cnb.cz"),
    ("DE", "Germany", "EUR", True, 22, "8n:bank 10n:account", "DE89370400440532013000", "Deutsche Bundesbank", "https://www.bundesbank.de"),
    ("DJ", "Djibouti", "DJF", False, 27, "5n:bank 5n:branch 11n:account 2n:check", "DJ2100010000000154000100186", "Central Bank of Djibouti", "https://www.banque-centrale.dj"),
    ("DK", "Denmark", "DKK", True, 18, "4n:bank 9n:account 1n:check", "DK5000400440116243", "Danmarks Nationalbank", "https://www.nationalbanken.dk"),
    ("DO", "Dominican Republic", "DOP", False, 28, "4c:bank 20n:account", "DO28BAGR00000001212453611324", "Central Bank of the Dominican Republic", "https://www.bancentral.gov.do"),
    ("EE", "Estonia", "EUR", True, 20, "2n:bank 2n:branch 11n:account 1n:check", "EE382200221020145685", "Bank of Estonia", "https://www.eestipank.ee"),
    ("EG", "Egypt", "EGP", False, 29, "4n:bank 4n:branch 17n:account", "EG380019000500000000263180002", "Central Bank of Egypt", "https://www.cbe.org.eg"),
    ("ES", "Spain", "EUR", True, 24, "4n:bank 4n:branch 2n:check 10n:account", "ES9121000418450200051332", "Banco de España", "https://www.bde.es"),
    ("FI", "Finland", "EUR", True, 18, "3n:bank 11n:account", "FI2112345600000785", "Bank of Finland", "https://www.suomenpankki.fi"),
    ("FK", "Falkland Islands", "FKP", False, 18, "2a:bank 12n:account", "FK88SC123456789012", "Falkland Islands Government Treasury", ""),
    ("FO", "Faroe Islands", "DKK", False, 18, "4n:bank 9n:account 1n:check", "FO6264600001631634", "Danmarks Nationalbank", "https://www.nationalbanken.dk"),
    ("FR", "France", "EUR", True, 27, "5n:bank 5n:branch 11c:account 2n:check", "FR1420041010050500013M02606", "Banque de France", "https://www.banque-france.fr"),
    ("GB", "United Kingdom", "GBP", True, 22, "4a:bank 6n:branch 8n:account", "GB29NWBK60161331926819", "Bank of England", "https://www.bankofengland.co.uk"),
    ("GE", "Georgia", "GEL", False, 22, "2a:bank 16n:account", "GE29NB0000000101904917", "National Bank of Georgia", "https://nbg.gov.ge"),
    ("GI", "Gibraltar", "GIP", True, 23, "4a:bank 15c:account", "GI75NWBK000000007099453", "Gibraltar Financial Services Commission", "https://www.gfsc.gi"),
    ("GL", "Greenland", "DKK", False, 18, "4n:bank 9n:account 1n:check", "GL8964710001000206", "Danmarks Nationalbank", "https://www.nationalbanken.dk"),
    ("GR", "Greece", "EUR", True, 27, "3n:bank 4n:branch 16c:account", "GR1601101250000000012300695", "Bank of Greece", "https://www.bankofgreece.gr"),
    ("GT", "Guatemala", "GTQ", False, 28, "4c:bank 20c:account", "GT82TRAJ01020000001210029690", "Bank of Guatemala", "https://www.banguat.gob.gt"),
    ("HR", "Croatia", "EUR", True, 21, "7n:bank 10n:account", "HR1210010051863000160", "Croatian National Bank", "https://www.hnb.hr"),
    ("HU", "Hungary", "HUF", True, 28, "3n:bank 4n:branch 1n:check 15n:account 1n:check", "HU42117730161111101800000000", "Magyar Nemzeti Bank", "https://www.mnb.hu"),
    ("IE", "Ireland", "EUR", True, 22, "4a:bank 6n:branch 8n:account", "IE29AIBK93115212345678", "Central Bank of Ireland", "https://www.centralbank.ie"),
    ("IL", "Israel", "ILS", False, 23, "3n:bank 3n:branch 13n:account", "IL620108000000099999999", "Bank of Israel", "https://www.boi.org.il"),
    ("IQ", "Iraq", "IQD", False, 23, "4a:bank 3n:branch 12n:account", "IQ98NBIQ850123456789012", "Central Bank of Iraq", "https://cbi.iq"),
    ("IS", "Iceland", "ISK", True, 26, "4n:bank 2n:type 16n:account", "IS140159260076545510730339", "Central Bank of Iceland", "https://www.cb.is"),
    ("IT", "Italy", "EUR", True, 27, "1a:check 5n:bank 5n:branch 12c:account", "IT60X0542811101000000123456", "Banca d'Italia", "https://www.bancaditalia.it"),
    ("JO", "Jordan", "JOD", False, 30, "4a:bank 4n:branch 18c:account", "JO94CBJO0010000000000131000302", "Central Bank of Jordan", "https://www.cbj.gov.jo"),
    ("KW", "Kuwait", "KWD", False, 30, "4a:bank 22c:account", "KW81CBKU0000000000001234560101", "Central Bank of Kuwait", "https://www.cbk.gov.kw"),
    ("KZ", "Kazakhstan", "KZT", False, 20, "3n:bank 13c:account", "KZ86125KZT5004100100", "National Bank of Kazakhstan", "https://nationalbank.kz"),
    ("LB", "Lebanon", "LBP", False, 28, "4n:bank 20c:account", "LB62099900000001001901229114", "Banque du Liban", "https://www.bdl.gov.lb"),
    ("LC", "Saint Lucia", "XCD", False, 32, "4a:bank 24c:account", "LC55HEMM000100010012001200023015", "Eastern Caribbean Central Bank", "https://www.eccb-centralbank.org"),
    ("LI", "Liechtenstein", "CHF", True, 21, "5n:bank 12c:account", "LI21088100002324013AA", "Swiss National Bank", "https://www.snb.ch"),
    ("LT", "Lithuania", "EUR", True, 20, "5n:bank 11n:account", "LT121000011101001000", "Bank of Lithuania", "https://www.lb.lt"),
    ("LU", "Luxembourg", "EUR", True, 20, "3n:bank 13c:account", "LU280019400644750000", "Banque centrale du Luxembourg", "https://www.bcl.lu"),
    ("LV", "Latvia", "EUR", True, 21, "4a:bank 13c:account", "LV80BANK0000435195001", "Bank of Latvia", "https://www.bank.lv"),
    ("LY", "Libya", "LYD", False, 25, "3n:bank 3n:branch 15n:account", "LY83002048000020100120361", "Central Bank of Libya", "https://cbl.gov.ly"),
    ("MC", "Monaco", "EUR", True, 27, "5n:bank 5n:branch 11c:account 2n:check", "MC5811222000010123456789030", "Banque de France", "https://www.banque-france.fr"),
    ("MD", "Moldova", "MDL", False, 24, "2c:bank 18c:account", "MD24AG000225100013104168", "National Bank of Moldova", "https://www.bnm.md"),
    ("ME", "Montenegro", "EUR", False, 22, "3n:bank 13n:account 2n:check", "ME25505000012345678951", "Central Bank of Montenegro", "https://www.cbcg.me"),
    ("MK", "North Macedonia", "MKD", False, 19, "3n:bank 10c:account 2n:check", "MK07250120000058984", "National Bank of the Republic of North Macedonia", "https://www.nbrm.mk"),
    ("MN", "Mongolia", "MNT", False, 20, "4n:bank 12n:account", "MN121234123456789123", "Bank of Mongolia", "https://www.mongolbank.mn"),
    ("MR", "Mauritania", "MRU", False, 27, "5n:bank 5n:branch 11n:account 2n:check", "MR1300020001010000123456753", "Central Bank of Mauritania", "https://www.bcm.mr"),
    ("MT", "Malta", "EUR", True, 31, "4a:bank 5n:branch 18c:account", "MT84MALT011000012345MTLCAST001S", "Central Bank of Malta", "https://www.centralbankmalta.org"),
    ("MU", "Mauritius", "MUR", False, 30, "4a:bank 2n:bank 2n:branch 12n:account 3n:reserved 3a:currency", "MU17BOMM0101101030300200000MUR", "Bank of Mauritius", "https://www.bom.mu"),
    ("NI", "Nicaragua", "NIO", False, 28, "4a:bank 20n:account", "NI45BAPR00000013000003558124", "Central Bank of Nicaragua", "https://www.bcn.gob.ni"),
    ("NL", "Netherlands", "EUR", True, 18, "4a:bank 10n:account", "NL91ABNA0417164300", "De Nederlandsche Bank", "https://www.dnb.nl"),
    ("NO", "Norway", "NOK", True, 15, "4n:bank 6n:account 1n:check", "NO9386011117947", "Norges Bank", "https://www.norges-bank.no"),
    ("OM", "Oman", "OMR", False, 23, "3n:bank 16c:account", "OM810180000001299123456", "Central Bank of Oman", "https://cbo.gov.om"),
    ("PK", "Pakistan", "PKR", False, 24, "4a:bank 16c:account", "PK36SCBL0000001123456702", "State Bank of Pakistan", "https://www.sbp.org.pk"),
    ("PL", "Poland", "PLN", True, 28, "3n:bank 4n:branch 1n:check 16n:account", "PL61109010140000071219812874", "Narodowy Bank Polski", "https://www.nbp.pl"),
    ("PS", "Palestine", "ILS", False, 29, "4a:bank 21c:account", "PS92PALS000000000400123456702", "Palestine Monetary Authority", "https://www.pma.ps"),
    ("PT", "Portugal", "EUR", True, 25, "4n:bank 4n:branch 11n:account 2n:check", "PT50000201231234567890154", "Banco de Portugal", "https://www.bportugal.pt"),
    ("QA", "Qatar", "QAR", False, 29, "4a:bank 21c:account", "QA58DOHB00001234567890ABCDEFG", "Qatar Central Bank", "https://www.qcb.gov.qa"),
    ("RO", "Romania", "RON", True, 24, "4a:bank 16c:account", "RO49AAAA1B31007593840000", "National Bank of Romania", "https://www.bnr.ro"),
    ("RS", "Serbia", "RSD", False, 22, "3n:bank 13n:account 2n:check", "RS35260005601001611379", "National Bank of Serbia", "https://www.nbs.rs"),
    ("RU", "Russia", "RUB", False, 33, "9n:bank 5n:branch 15c:account", "RU0204452560040702810412345678901", "Central Bank of the Russian Federation", "https://www.cbr.ru"),
    ("SA", "Saudi Arabia", "SAR", False, 24, "2n:bank 18c:account", "SA0380000000608010167519", "Saudi Central Bank", "https://www.sama.gov.sa"),
    ("SC", "Seychelles", "SCR", False, 31, "4a:bank 2n:bank 2n:branch 16n:account 3a:currency", "SC18SSCB11010000000000001497USD", "Central Bank of Seychelles", "https://www.cbs.sc"),
    ("SD", "Sudan", "SDG", False, 18, "2n:bank 12n:account", "SD2129010501234001", "Central Bank of Sudan", "https://cbos.gov.sd"),
    ("SE", "Sweden", "SEK", True, 24, "3n:bank 16n:account 1n:check", "SE4550000000058398257466", "Sveriges Riksbank", "https://www.riksbank.se"),
    ("SI", "Slovenia", "EUR", True, 19, "5n:bank 8n:account 2n:check", "SI56263300012039086", "Bank of Slovenia", "https://www.bsi.si"),
    ("SK", "Slovakia", "EUR", True, 24, "4n:bank 6n:prefix 10n:account", "SK3112000000198742637541", "National Bank of Slovakia", "https://nbs.sk"),
    ("SM", "San Marino", "EUR", True, 27, "1a:check 5n:bank 5n:branch 12c:account", "SM86U0322509800000000270100", "Central Bank of the Republic of San Marino", "https://www.bcsm.sm"),
    ("SO", "Somalia", "SOS", False, 23, "4n:bank 3n:branch 12n:account", "SO211000001001000100141", "Central Bank of Somalia", "https://centralbank.gov.so"),
    ("ST", "Sao Tome and Principe", "STN", False, 25, "4n:bank 4n:branch 11n:account 2n:check", "ST23000100010051845310146", "Central Bank of Sao Tome and Principe", "https://www.bcstp.st"),
    ("SV", "El Salvador", "USD", False, 28, "4a:bank 20n:account", "SV62CENR00000000000000700025", "Central Reserve Bank of El Salvador", "https://www.bcr.gob.sv"),
    ("TL", "Timor-Leste", "USD", False, 23, "3n:bank 14n:account 2n:check", "TL380080012345678910157", "Central Bank of Timor-Leste", "https://www.bancocentral.tl"),
    ("TN", "Tunisia", "TND", False, 24, "2n:bank 3n:branch 13n:account 2n:check", "TN5910006035183598478831", "Central Bank of Tunisia", "https://www.bct.gov.tn"),
    ("TR", "Turkey", "TRY", False, 26, "5n:bank 1n:reserved 16c:account", "TR330006100519786457841326", "Central Bank of the Republic of Turkey", "https://www.tcmb.gov.tr"),
    ("UA", "Ukraine", "UAH", False, 29, "6n:bank 19c:account", "UA213223130000026007233566001", "National Bank of Ukraine", "https://bank.gov.ua"),
    ("VA", "Vatican City", "EUR", True, 22, "3n:bank 15n:account", "VA59001123000012345678", "Financial Supervisory and Intelligence Authority", "https://www.asif.va"),
    ("VG", "British Virgin Islands", "USD", False, 24, "4a:bank 16n:account", "VG96VPVG0000012345678901", "BVI Financial Services Commission", "https://www.bvifsc.vg"),
    ("XK", "Kosovo", "EUR", False, 20, "4n:bank 10n:account 2n:check", "XK051212012345678906", "Central Bank of the Republic of Kosovo", "https://bqk-kos.org"),
    ("YE", "Yemen", "YER", False, 30, "4a:bank 4n:branch 18c:account", "YE15CBYE0001018861234567891234", "Central Bank of Yemen", "https://www.centralbank.gov.ye"),
]


def build_registry(rows=_REGISTRY_ROWS) -> CountryRegistry:
    """Build a registry from table rows. Raises ValueError on inconsistent data."""
    records: Dict[str, CountryRecord] = {}
    for code, name, currency, is_sepa, length, layout, example, cb_name, cb_url in rows:
        if code in records:
            raise ValueError(f"Duplicate country code in IBAN registry: {code}")
        records[code] = CountryRecord(
            code=code,
            name=name,
            currency=currency,
            is_sepa=is_sepa,
            length=length,
            fields=parse_layout(layout),
            example=example,
            central_bank_name=cb_name,
            central_bank_url=cb_url,
        )
    return CountryRegistry(records)


_default: Optional[CountryRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> CountryRegistry:
    """Return the process-wide registry, building it on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = build_registry()
                logger.debug("IBAN registry loaded: %d countries", len(_default))
    return _default

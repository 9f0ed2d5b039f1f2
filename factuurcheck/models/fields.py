"""
Registry of the invoice fields required by Dutch invoicing rules.

Each field is declared once. The LLM prompt, the reply schema
(ExtractedFields) and the compliance check are all derived from FIELD_REGISTRY,
in declaration order.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import ConfigDict, Field, create_model

from .invoice import AddressField, InvoiceField

FieldKind = Literal["simple", "address"]


@dataclass(frozen=True)
class FieldSpec:
    """One required invoice field."""

    key: str  # JSON key in the LLM reply and name in the compliance result
    attr: str  # attribute name on ExtractedFields
    kind: FieldKind
    description: str

    @property
    def model(self) -> type:
        return AddressField if self.kind == "address" else InvoiceField


FIELD_REGISTRY: tuple[FieldSpec, ...] = (
    FieldSpec("factuurnummer", "factuurnummer", "simple",
              "Een uniek, opvolgend nummer voor de factuur"),
    FieldSpec("factuurdatum", "factuurdatum", "simple",
              "De datum waarop de factuur is uitgereikt"),
    FieldSpec("leverancierNaam", "leverancier_naam", "simple",
              "De volledige naam van de leverancier/verkoper"),
    FieldSpec("btwNummer", "btw_nummer", "simple",
              "Het BTW-identificatienummer van de leverancier "
              "(format: NL + 9 cijfers + B + 2 cijfers, of vergelijkbaar EU formaat)"),
    FieldSpec("klantNaam", "klant_naam", "simple",
              "De volledige naam van de klant/koper"),
    FieldSpec("totaalbedrag", "totaalbedrag", "simple",
              "Het totaalbedrag van de factuur inclusief BTW"),
    FieldSpec("kvkNummer", "kvk_nummer", "simple",
              "Het KVK-nummer (Kamer van Koophandel) van de leverancier, 8 cijfers"),
    FieldSpec("leverancierAdres", "leverancier_adres", "address",
              "Het volledige adres van de leverancier"),
    FieldSpec("klantAdres", "klant_adres", "address",
              "Het volledige adres van de klant"),
    FieldSpec("omschrijving", "omschrijving", "simple",
              "Een omschrijving van de geleverde goederen of diensten (hoeveelheid en aard)"),
    FieldSpec("leveringsdatum", "leveringsdatum", "simple",
              "De datum van levering of uitvoering van de dienst"),
    FieldSpec("bedragExclBtw", "bedrag_excl_btw", "simple",
              "Het bedrag exclusief BTW"),
    FieldSpec("btwTarief", "btw_tarief", "simple",
              "Het toegepaste BTW-tarief (bijvoorbeeld 21%, 9% of 0%)"),
    FieldSpec("btwBedrag", "btw_bedrag", "simple",
              "Het BTW-bedrag"),
)


ExtractedFields = create_model(
    "ExtractedFields",
    __config__=ConfigDict(populate_by_name=True),
    **{spec.attr: (spec.model, Field(alias=spec.key)) for spec in FIELD_REGISTRY},
)

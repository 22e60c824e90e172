"""Localization of template action plans.

Phrase tables are applied in a single pass: phrases are tried longest first,
only on word boundaries, ignoring case. Text that was already replaced is
never translated a second time.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Sequence, Tuple

SPANISH_PHRASES: Dict[str, str] = {
    "Call": "Llame",
    "Visit": "Visite",
    "during": "durante",
    "to check": "para verificar",
    "current availability": "disponibilidad actual",
    "at": "en",
    "their open hours": "sus horarios de atención",
    "Bring": "Traiga",
    "valid ID": "identificación válida",
    "proof of address": "comprobante de domicilio",
    "if required": "si es necesario",
    "No appointment needed": "No se necesita cita",
    "for walk-ins": "para visitas sin cita",
    "or": "o",
    "to learn about": "para conocer",
    "application requirements": "requisitos de solicitud",
    "Gather required documents": "Reúna los documentos requeridos",
    "proof of income": "comprobante de ingresos",
    "household information": "información del hogar",
    "Schedule an appointment": "Programe una cita",
    "schedule an appointment": "programar una cita",
    "submit your application": "presente su solicitud",
    "online": "en línea",
    "in person": "en persona",
    "to speak with": "para hablar con",
    "a counselor": "un consejero",
    "If this is a crisis": "Si esto es una crisis",
    "call immediately": "llame inmediatamente",
    "services are available": "los servicios están disponibles",
    "Be ready to provide": "Esté preparado para proporcionar",
    "basic information": "información básica",
    "about your situation": "sobre su situación",
    "insurance status": "estado del seguro",
    "if applicable": "si corresponde",
    "to request an intake appointment": "para solicitar una cita de admisión",
    "Prepare a brief description": "Prepare una breve descripción",
    "of your legal issue": "de su problema legal",
    "any relevant documents": "cualquier documento relevante",
    "Attend your appointment": "Asista a su cita",
    "free legal services": "servicios legales gratuitos",
    "are provided": "se proporcionan",
    "based on eligibility": "según la elegibilidad",
    "Complete an intake form": "Complete un formulario de admisión",
    "and assessment": "y evaluación",
    "to determine": "para determinar",
    "which services fit your needs": "qué servicios se ajustan a sus necesidades",
    "Attend orientation": "Asista a la orientación",
    "and training sessions": "y sesiones de capacitación",
    "to build skills": "para desarrollar habilidades",
    "and connect with employers": "y conectarse con empleadores",
    "Contact": "Contacte",
    "for more information": "para más información",
    "Prepare any required documents": "Prepare cualquier documento requerido",
    "and schedule an appointment if needed": "y programe una cita si es necesario",
}


class Localizer(ABC):
    """Translates plan steps into the user's preferred language."""

    @abstractmethod
    def localize(self, steps: Sequence[str], language: Optional[str]) -> Tuple[str, ...]:
        """Return translated steps, or the input unchanged for unsupported languages."""

    def supports(self, language: Optional[str]) -> bool:
        return False


class _PhraseTable:
    def __init__(self, phrases: Mapping[str, str]):
        self._exact = dict(phrases)
        self._lookup: Dict[str, str] = {}
        for en, translated in phrases.items():
            self._lookup.setdefault(en.casefold(), translated)
        ordered = sorted(phrases, key=len, reverse=True)
        alternation = "|".join(re.escape(phrase) for phrase in ordered)
        self._pattern = re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)

    def _replace(self, match: "re.Match[str]") -> str:
        original = match.group(0)
        if original in self._exact:
            return self._exact[original]
        translated = self._lookup[original.casefold()]
        # keep sentence-initial capitals and mid-sentence lower case
        if original[0].isupper():
            return translated[0].upper() + translated[1:]
        return translated[0].lower() + translated[1:]

    def translate(self, text: str) -> str:
        return self._pattern.sub(self._replace, text)


class PhraseTableLocalizer(Localizer):
    """Localizer backed by per-language phrase tables.

    Example:
        >>> localizer = PhraseTableLocalizer()
        >>> localizer.localize(["Call 211 during business hours."], "Spanish")
        ('Llame 211 durante business hours.',)
    """

    def __init__(self, tables: Optional[Mapping[str, Mapping[str, str]]] = None):
        if tables is None:
            tables = {"spanish": SPANISH_PHRASES}
        self._tables = {
            language.strip().casefold(): _PhraseTable(phrases)
            for language, phrases in tables.items()
            if phrases
        }

    def supports(self, language: Optional[str]) -> bool:
        return bool(language) and language.strip().casefold() in self._tables

    def localize(self, steps: Sequence[str], language: Optional[str]) -> Tuple[str, ...]:
        if not self.supports(language):
            return tuple(steps)
        table = self._tables[language.strip().casefold()]
        return tuple(table.translate(step) for step in steps)

"""
Static vocabularies used to recognize and normalize contact columns.

The values here mirror the contact schema of the product: header aliases in
Portuguese, English and Spanish, the canonical interest list and the gender
options. Every pipeline entry point receives an ``ImportVocabulary`` so tests
can substitute alternate vocabularies without touching the engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Dict, FrozenSet, Optional, Tuple


CANONICAL_FIELDS: Tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "age",
    "gender",
    "state",
    "city",
    "interests",
    "source",
    "notes",
)

DEFAULT_SOURCE = "Importação"

# Substrings matched against lowercased header labels.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("nome", "name", "nombre"),
    "email": ("email", "e-mail", "correo", "mail"),
    "phone": ("telefone", "phone", "celular", "whatsapp", "fone", "teléfono", "telefono", "tel", "mobile"),
    "age": ("idade", "age", "edad"),
    "gender": ("gênero", "genero", "género", "sexo", "gender", "sex"),
    "state": ("estado", "state", "uf", "provincia"),
    "city": ("cidade", "city", "município", "municipio", "ciudad"),
    "interests": ("interesse", "interest", "intereses", "hobbies", "hobby"),
    "source": ("origem", "fonte", "source", "origen"),
    "notes": ("observaç", "observac", "obs", "notas", "notes", "nota", "comentário", "comentario", "comments"),
}

# A header containing one of these substrings never maps to the field.
FIELD_ALIAS_EXCLUSIONS: Dict[str, Tuple[str, ...]] = {
    "age": ("cidade",),
}

# Whole cells or word tokens that mark row 0 as a header row.
HEADER_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "nome", "name", "nombre", "contato", "contact",
        "email", "e-mail", "mail", "correo",
        "telefone", "phone", "celular", "whatsapp", "fone", "tel", "telefono", "teléfono", "mobile",
        "idade", "age", "edad",
        "gênero", "genero", "género", "sexo", "gender", "sex",
        "estado", "state", "uf", "provincia",
        "cidade", "city", "município", "municipio", "ciudad",
        "interesses", "interesse", "interests", "interest", "intereses", "hobbies",
        "origem", "fonte", "source", "origen",
        "observação", "observações", "observacao", "observacoes", "obs", "notas", "notes", "nota",
    }
)

CONTACT_INTERESTS: Tuple[str, ...] = (
    "Religião Católica",
    "Religião Evangélica",
    "Religião Espírita",
    "Religião Umbanda/Candomblé",
    "Outras Religiões",
    "Futebol",
    "Vôlei",
    "Basquete",
    "Natação",
    "Artes Marciais",
    "Corrida/Atletismo",
    "Ciclismo",
    "Crossfit/Academia",
    "Yoga/Pilates",
    "Esportes Radicais",
    "Gastronomia",
    "Culinária Vegana/Vegetariana",
    "Vinhos",
    "Cervejas Artesanais",
    "Café Especial",
    "Música Sertaneja",
    "Música Gospel",
    "MPB",
    "Rock",
    "Música Clássica",
    "Pagode/Samba",
    "Funk",
    "Música Eletrônica",
    "Jazz",
    "Cinema",
    "Teatro",
    "Literatura",
    "Artes Plásticas",
    "Fotografia",
    "Dança",
    "Artesanato",
    "Jardinagem",
    "Pets/Animais de Estimação",
    "Meio Ambiente",
    "Sustentabilidade",
    "Reciclagem",
    "Educação",
    "Tecnologia",
    "Games/E-sports",
    "Empreendedorismo",
    "Voluntariado",
    "Causas Sociais",
    "Direitos Humanos",
    "Feminismo",
    "LGBTQIA+",
    "Movimento Negro",
    "Terceira Idade",
    "Juventude",
    "Infância",
    "Saúde Mental",
    "Saúde e Bem-Estar",
    "Nutrição",
    "Moda",
    "Beleza",
    "Turismo",
    "Viagens",
    "Camping/Trilhas",
    "Pesca",
    "Caça",
    "Agricultura Familiar",
    "Pecuária",
    "Agronegócio",
    "Comércio Local",
    "Indústria",
    "Serviços",
    "Transporte Público",
    "Mobilidade Urbana",
    "Segurança Pública",
    "Defesa Civil",
    "Bombeiros",
    "Política Partidária",
    "Movimentos Sociais",
    "Sindicatos",
    "Associações de Classe",
    "Moradia Popular",
    "Saneamento Básico",
    "Iluminação Pública",
    "Pavimentação",
    "Saúde Pública",
    "Hospitais",
    "Postos de Saúde",
    "Escolas Públicas",
    "Universidades",
    "Creches",
    "Cultura Popular",
    "Festas Tradicionais",
    "Carnaval",
    "Festas Juninas",
    "Rodeios",
    "Feiras e Exposições",
)

# Checked in order; the first group containing the lowercased value wins.
GENDER_GROUPS: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("Masculino", frozenset({"masculino", "masc", "m", "male", "man", "homem", "hombre"})),
    ("Feminino", frozenset({"feminino", "fem", "f", "female", "woman", "mulher", "mujer", "femenino"})),
    (
        "Não-binário",
        frozenset({
            "não-binário", "não binário", "nao-binario", "nao binario", "não-binario",
            "nb", "non-binary", "nonbinary", "non binary", "no binario",
        }),
    ),
    ("Outro", frozenset({"outro", "outra", "other", "otro"})),
    (
        "Prefiro não responder",
        frozenset({
            "prefiro não responder", "prefiro nao responder", "prefiro não dizer",
            "prefiro nao dizer", "prefer not to say", "prefiero no decir",
        }),
    ),
)


@dataclass(frozen=True)
class ImportVocabulary:
    """Read-only configuration bundle consumed by every pipeline stage."""

    aliases: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(FIELD_ALIASES))
    alias_exclusions: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(FIELD_ALIAS_EXCLUSIONS))
    header_keywords: FrozenSet[str] = HEADER_KEYWORDS
    interests: Tuple[str, ...] = CONTACT_INTERESTS
    gender_groups: Tuple[Tuple[str, FrozenSet[str]], ...] = GENDER_GROUPS
    default_source: str = DEFAULT_SOURCE

    def with_overrides(self, **changes) -> "ImportVocabulary":
        """Return a copy with the given attributes replaced."""
        return replace(self, **changes)

    @cached_property
    def _interest_lookup(self) -> Dict[str, str]:
        return {interest.lower(): interest for interest in self.interests}

    def canonical_interest(self, token: str) -> Optional[str]:
        """Return the canonical spelling of ``token`` or None when it is not in the vocabulary."""
        return self._interest_lookup.get(token.strip().lower())

    def resolve_gender(self, value: str) -> Optional[str]:
        """Map a free-text gender value onto its canonical option."""
        lowered = value.strip().lower()
        if not lowered:
            return None
        for canonical, synonyms in self.gender_groups:
            if lowered in synonyms or lowered == canonical.lower():
                return canonical
        return None

    @property
    def gender_options(self) -> Tuple[str, ...]:
        return tuple(canonical for canonical, _ in self.gender_groups)


DEFAULT_VOCABULARY = ImportVocabulary()

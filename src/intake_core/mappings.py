"""Label → slug mapping tables for every enumerable question.

Labels are the exact strings shown by the wizard controls; slugs are the
stable codes persisted in answers and used by the derivation logic.

  Current questionnaire (``MAPPINGS``):
    one table per single/multi-select question of the V2 form.

  Legacy questionnaire (``MAPPINGS_V1``):
    kept read-only so pre-existing records can still be rendered.

Within a table labels are unique (dict keys) and slugs are unique as well,
which is what makes :func:`get_label_from_slug` a well-defined inverse.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from intake_core.constants import EMPTY_LABEL

MappingTable = Mapping[str, str]


# ---------------------------------------------------------------------------
# Current questionnaire (V2)
# ---------------------------------------------------------------------------

MAPPINGS: dict[str, dict[str, str]] = {
    # Q2: single select
    "target": {
        "Particuliers": "individuals",
        "Étudiants": "students",
        "Freelances": "freelancers",
        "Créateurs de contenu": "creators",
        "Entrepreneurs/PME": "smb",
        "Autre": "other",
    },
    # Q3
    "frequency": {
        "Tous les jours": "daily",
        "Plusieurs fois par semaine": "weekly",
        "Occasionnellement": "occasional",
        "Rarement": "rare",
    },
    # Q4
    "current_solution": {
        "Ils bricolent seuls": "diy",
        "Ils utilisent un outil imparfait": "bad_tool",
        "Ils payent quelqu'un": "pay_someone",
        "Ils ne font rien": "do_nothing",
    },
    # Q6
    "price_range": {
        "Moins de 10€": "lt10",
        "10–30€": "10_30",
        "30–100€": "30_100",
        "Plus de 100€": "gt100",
    },
    # Q7: single select, emitted as a list in derived fields
    "revenue_model": {
        "Paiement unique": "one_time",
        "Abonnement mensuel": "monthly",
        "Abonnement annuel": "annual",
        "Paiement à l'usage": "pay_per_use",
        "Freemium": "freemium",
    },
    # Q8
    "competition": {
        "Oui, beaucoup": "high",
        "Oui, quelques-uns": "medium",
        "Très peu": "low",
        "Aucun": "none",
    },
    # Q10
    "first_action": {
        "Découvrir / comprendre": "discover",
        "Renseigner une info": "provide_info",
        "Créer / générer quelque chose": "produce",
        "Acheter / commander": "pay",
    },
    # Q12
    "return_reason": {
        "Oui, souvent": "often",
        "Oui, de temps en temps": "sometimes",
        "Non, usage unique": "one_time",
    },
    # Q13: exclusive multi select ("Rien")
    "return_items": {
        "Historique": "history",
        "Contenus créés": "created_content",
        "Achats": "purchases",
        "Paramètres": "settings",
        "Rien": "nothing",
    },
    # Q14
    "need_account": {
        "Oui indispensable": "required",
        "Oui plus tard": "later",
        "Non inutile": "none",
    },
    # Q15: exclusive multi select ("Rien")
    "store_what": {
        "Comptes utilisateurs": "users",
        "Contenus / projets": "content",
        "Paiements": "payments",
        "Fichiers": "files",
        "Historique": "history",
        "Rien": "nothing",
    },
    # Q16
    "ai_type": {
        "Non": "none",
        "Oui, il génère du contenu": "generate",
        "Oui, il analyse des données": "analyze",
        "Oui, il fait des recommandations": "recommend",
    },
    # Q17: plain multi select
    "integrations": {
        "Paiement": "payment",
        "Email": "email",
        "Réseaux sociaux": "social",
        "Fichiers": "files",
        "Autre": "other",
    },
    # Q18
    "site_type": {
        "Vitrine simple": "static",
        "Outil interactif": "interactive",
        "Application intelligente": "intelligent",
    },
    # Q20
    "design_style": {
        "Premium minimal": "minimal",
        "Fun & dynamique": "fun",
        "Dark / tech": "dark",
        "Luxe": "luxury",
        "Très simple": "simple",
        "Autre": "other",
    },
    # Q21
    "homepage_focus": {
        "Un gros bouton": "big_button",
        "Un champ à remplir": "input_field",
        "Un tableau de bord": "dashboard",
        "Un feed / liste": "feed",
        "Autre": "other",
    },
    # Q22
    "output_type": {
        "Une page de rapport": "report",
        "Un tableau de bord": "dashboard",
        "Un fichier / PDF": "file",
        "Un contenu prêt à poster": "ready_content",
        "Autre": "other",
    },
}


# ---------------------------------------------------------------------------
# Legacy questionnaire (V1)
# ---------------------------------------------------------------------------

MAPPINGS_V1: dict[str, dict[str, str]] = {
    "audience": {
        "Particuliers": "individuals",
        "Professionnels / Entreprises": "businesses",
        "Étudiants": "students",
        "Freelances": "freelancers",
        "PME": "smb",
        "Créateurs de contenu": "creators",
        "Grand public": "general_public",
        "Autre": "other",
    },
    "monetization": {
        "Paiement unique": "one_time",
        "Abonnement mensuel": "monthly",
        "Abonnement annuel": "annual",
        "Paiement à l'utilisation": "pay_per_use",
        "Freemium": "freemium",
        "Publicité": "ads",
        "Commission / Marketplace": "commission_marketplace",
        "Sponsoring": "sponsoring",
        "Autre": "other",
    },
    "main_action": {
        "Découvrir / comprendre": "discover",
        "Renseigner une information": "provide_info",
        "Produire quelque chose (créer, générer, publier)": "produce",
        "Payer / commander": "pay",
    },
    "usage_type": {
        "Une utilisation unique (il vient, fait son truc, repart)": "one_time",
        "Une utilisation répétée (il a une raison de revenir)": "repeated",
    },
    "return_items": {
        "Un historique": "history",
        "Des contenus créés": "created_content",
        "Des achats": "purchases",
        "Des paramètres": "settings",
        "Rien du tout": "nothing",
    },
    "personal_space": {
        "Oui, indispensable": "required",
        "Oui, mais plus tard": "later",
        "Non, inutile": "none",
    },
    "automation": {
        "Répondre automatiquement": "auto_reply",
        "Générer du contenu": "generate_content",
        "Analyser ce que l'utilisateur envoie": "analyze_input",
        "Proposer des choix personnalisés": "personalized_choices",
    },
    "integrations": {
        "Paiement": "payment",
        "Réseaux sociaux": "social",
        "Email": "email",
        "Fichiers": "files",
        "Autre": "other",
    },
    "site_type": {
        "Statique (vitrine)": "static",
        "Interactif": "interactive",
        '"Intelligent"': "intelligent",
    },
    "admin_features": {
        "Voir les utilisateurs": "view_users",
        "Modifier du contenu": "edit_content",
        "Bloquer / supprimer des choses": "moderate_delete",
    },
    "autonomy": {
        "Oui, complètement autonome": "autonomous",
        "Non, nécessite une intervention régulière": "needs_regular_intervention",
    },
}


# ---------------------------------------------------------------------------
# Reverse lookup helpers
# ---------------------------------------------------------------------------

def get_label_from_slug(
    mapping: MappingTable | None,
    slug: str | None,
) -> str:
    """Return the label whose slug is ``slug``.

    Never raises:
      - empty / ``None`` slug → ``"—"``
      - no table, or no matching entry → the slug itself, stringified
    """
    if not slug:
        return EMPTY_LABEL
    if not mapping:
        return str(slug)
    for label, value in mapping.items():
        if value == slug:
            return label
    return str(slug)


def get_labels_from_slugs(
    mapping: MappingTable,
    slugs: Iterable[str] | None,
) -> list[str]:
    """Map a slug sequence back to labels, dropping slugs with no label."""
    if not slugs:
        return []
    reverse = {value: label for label, value in mapping.items()}
    return [reverse[slug] for slug in slugs if slug in reverse]


def slug_set(mapping: MappingTable) -> frozenset[str]:
    """The fixed set of slugs a table can produce."""
    return frozenset(mapping.values())

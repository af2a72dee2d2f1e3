"""Email templates for alerts.

Templates use ``${name}`` placeholders (string.Template syntax, ``$$`` is a
literal dollar sign) and ``${if_name}...${endif_name}`` blocks that are kept
only when ``name`` has a non-empty value.
"""

import re
from dataclasses import dataclass
from string import Template
from typing import Dict, Mapping, Optional

from modules.alerts.models import AlertType

_CONDITIONAL = re.compile(r"\$\{if_(\w+)\}(.*?)\$\{endif_\1\}", re.DOTALL)


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    html: str


def _layout(header_style: str, heading: str, details: str = "") -> str:
    return "\n".join(
        [
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">',
            f'  <div style="{header_style} padding: 30px; text-align: center;">',
            f'    <h1 style="color: white; margin: 0;">{heading}</h1>',
            "  </div>",
            '  <div style="padding: 30px; background-color: #f9fafb;">',
            '    <h2 style="color: #333;">${title}</h2>',
            '    <p style="color: #666; line-height: 1.6;">${message}</p>',
            details,
            "  </div>",
            '  <div style="background: #e5e7eb; padding: 20px; text-align: center; color: #666; font-size: 12px;">',
            "    <p>© CanchaYA. Todos los derechos reservados.</p>",
            "  </div>",
            "</div>",
        ]
    )


_RESERVATION_DETAILS = "\n".join(
    [
        "    ${if_court_name}",
        '    <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0;">',
        '      <h3 style="margin-top: 0; color: #667eea;">Detalles de la Reserva</h3>',
        "      <p><strong>Cancha:</strong> ${court_name}</p>",
        "      <p><strong>Fecha:</strong> ${date}</p>",
        "      <p><strong>Hora:</strong> ${time}</p>",
        "      ${if_price}",
        "      <p><strong>Precio:</strong> $$${price}</p>",
        "      ${endif_price}",
        "    </div>",
        "    ${endif_court_name}",
        "    ${if_action_url}",
        '    <div style="text-align: center; margin: 30px 0;">',
        '      <a href="${action_url}" style="background: #667eea; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; display: inline-block;">',
        "        Ver Reserva",
        "      </a>",
        "    </div>",
        "    ${endif_action_url}",
    ]
)

DEFAULT_TEMPLATE = EmailTemplate(
    subject="Notificación - CanchaYA",
    html=_layout("background: #667eea;", "CanchaYA"),
)

EMAIL_TEMPLATES: Dict[AlertType, EmailTemplate] = {
    AlertType.RESERVATION_CONFIRMED: EmailTemplate(
        subject="Reserva Confirmada - CanchaYA",
        html=_layout(
            "background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);",
            "¡Reserva Confirmada!",
            _RESERVATION_DETAILS,
        ),
    ),
    AlertType.RESERVATION_CANCELLED: EmailTemplate(
        subject="Reserva Cancelada - CanchaYA",
        html=_layout("background: #ef4444;", "Reserva Cancelada"),
    ),
    AlertType.PAYMENT_CONFIRMED: EmailTemplate(
        subject="Pago Confirmado - CanchaYA",
        html=_layout("background: #10b981;", "✓ Pago Confirmado"),
    ),
    AlertType.RESERVATION_REMINDER: EmailTemplate(
        subject="Recordatorio de Reserva - CanchaYA",
        html=_layout("background: #f59e0b;", "⏰ Recordatorio"),
    ),
}


def get_template(
    alert_type: AlertType,
    overrides: Optional[Mapping[AlertType, EmailTemplate]] = None,
) -> EmailTemplate:
    if overrides and alert_type in overrides:
        return overrides[alert_type]
    return EMAIL_TEMPLATES.get(alert_type, DEFAULT_TEMPLATE)


def render(template: str, variables: Mapping[str, str]) -> str:
    """Render conditionals, then substitute ``${name}`` placeholders.

    Unknown placeholders are left as they are.

    Example:
        >>> render("Hola ${if_name}${name}${endif_name}!", {"name": "Ana"})
        'Hola Ana!'
    """
    previous = None
    while previous != template:
        previous = template
        template = _CONDITIONAL.sub(
            lambda m: m.group(2) if variables.get(m.group(1)) else "", template
        )
    return Template(template).safe_substitute(variables)

"""Form builder configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class FormBuilderSettings(BaseSettings):
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///formbuilder.db"
    echo_sql: bool = False
    app_title: str = "Form Builder"
    log_level: str = "INFO"

    # Logical table -> physical table name
    table_names: dict[str, str] = {
        "forms": "forms",
        "form_fields": "form_fields",
        "form_submissions": "form_submissions",
    }

    # Public endpoints live at /{route_prefix}/{slug}
    route_prefix: str = "forms"

    # Whether accepted submissions are written to form_submissions
    store_submissions: bool = True

    field_types: dict[str, str] = {
        "text": "Text Input",
        "textarea": "Textarea",
        "email": "Email",
        "select": "Select Dropdown",
        "checkbox": "Checkbox",
        "radio": "Radio Button",
        "date": "Date Picker",
        "number": "Number Input",
    }

    # Authoring palette only; any rule token is accepted at runtime.
    validation_rules: dict[str, str] = {
        "required": "Required",
        "email": "Valid Email",
        "numeric": "Numeric",
        "min:1": "Min Length (1)",
        "min:3": "Min Length (3)",
        "min:5": "Min Length (5)",
        "max:50": "Max Length (50)",
        "max:100": "Max Length (100)",
        "max:255": "Max Length (255)",
        "max:500": "Max Length (500)",
    }

    column_spans: dict[int, str] = {
        1: "Full Width",
        2: "1/2 Width",
        3: "1/3 Width",
    }

    # Defaults applied when a form is authored without these values
    default_success_message: str = "Thank you! Your form has been submitted successfully."
    default_submit_button_text: str = "Submit"
    default_columns: int = 1

    model_config = {"env_prefix": "FORMS_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def project_dir(self) -> Path:
        return self.base_dir.parent

    @property
    def templates_dir(self) -> Path:
        return self.base_dir / "templates"

    @property
    def public_prefix(self) -> str:
        """Route prefix normalized to a leading slash and no trailing slash."""
        return "/" + self.route_prefix.strip("/")

    def table_name(self, table: str) -> str:
        return self.table_names.get(table, table)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}


settings = FormBuilderSettings()

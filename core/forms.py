"""Forms validating dashboard API payloads."""

from __future__ import annotations

from django import forms

from analysis.dto import ChartType, Dataset

CHART_TYPE_CHOICES: tuple[tuple[str, str], ...] = (
    (ChartType.bar.value, "Bar (2D)"),
    (ChartType.line.value, "Line"),
    (ChartType.pie.value, "Pie"),
    (ChartType.scatter.value, "Scatter"),
    (ChartType.bar3d.value, "3D Column"),
    (ChartType.pie3d.value, "3D Pie"),
    (ChartType.line3d.value, "3D Line"),
    (ChartType.scatter3d.value, "3D Scatter"),
)


class DatasetForm(forms.Form):
    """Validate an already-parsed spreadsheet: a header list plus row objects."""

    headers = forms.JSONField(required=True)
    rows = forms.JSONField(required=False)

    def clean_headers(self) -> list[str]:
        """Require a list of scalar header names."""

        headers = self.cleaned_data.get("headers")
        if not isinstance(headers, list):
            raise forms.ValidationError("Headers must be a list of column names.")
        names: list[str] = []
        for header in headers:
            if header is None or isinstance(header, (dict, list)):
                raise forms.ValidationError("Header names must be strings or numbers.")
            names.append(str(header))
        if len(set(names)) != len(names):
            raise forms.ValidationError("Header names must be unique.")
        return names

    def clean_rows(self) -> list[dict[str, object]]:
        """Require a list of row objects; a missing value means no rows."""

        rows = self.cleaned_data.get("rows")
        if rows is None:
            return []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise forms.ValidationError("Rows must be a list of objects keyed by header.")
        return rows

    def to_dataset(self) -> Dataset:
        """Return the validated payload as a Dataset. Call after `is_valid()`."""

        return Dataset.from_records(self.cleaned_data["headers"], self.cleaned_data["rows"])


class ChartSelectionForm(DatasetForm):
    """Validate a dataset plus the dashboard's axis and chart type selections."""

    chart_type = forms.ChoiceField(required=False, choices=CHART_TYPE_CHOICES, label="Chart type")
    x_axis = forms.CharField(required=False, strip=False, label="X-Axis")
    y_axis = forms.CharField(required=False, strip=False, label="Y-Axis")
    z_axis = forms.CharField(required=False, strip=False, label="Z-Axis")

    def clean(self) -> dict[str, object]:
        """Require every selected axis to name one of the dataset headers."""

        cleaned = super().clean()
        headers = cleaned.get("headers")
        if not isinstance(headers, list):
            return cleaned

        for field_name in ("x_axis", "y_axis", "z_axis"):
            selected = cleaned.get(field_name) or ""
            if selected and selected not in headers:
                self.add_error(field_name, f"Unknown column: {selected!r}.")
        return cleaned

    def selected_chart_type(self) -> ChartType | None:
        """Return the chosen ChartType, or None when omitted."""

        return ChartType.parse(self.cleaned_data.get("chart_type") or None)

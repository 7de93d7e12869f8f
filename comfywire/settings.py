"""User settings stored by the server.

The settings map is open: every key below is optional and typed, any other
key is accepted and kept. Model fields use snake_case names; the dotted
``Comfy.*`` keys are the wire aliases and are what ``to_wire`` emits.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import ConfigDict, Field, StrictBool, StrictStr

from .primitives import FrozenList, Number, OpenWireModel, WireModel


class ColorPalette(OpenWireModel):
    """A user-defined color palette; the color groups are kept as sent."""

    id: StrictStr
    name: StrictStr
    colors: Dict[str, Any] = Field(default_factory=dict)


class BookmarkCustomization(WireModel):
    icon: Optional[StrictStr] = None
    color: Optional[StrictStr] = None


def _key(alias: str) -> Any:
    return Field(default=None, alias=alias)


class Settings(OpenWireModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    color_palette: Optional[StrictStr] = _key("Comfy.ColorPalette")
    custom_color_palettes: Optional[Dict[str, ColorPalette]] = _key(
        "Comfy.CustomColorPalettes"
    )
    confirm_clear: Optional[StrictBool] = _key("Comfy.ConfirmClear")
    dev_mode: Optional[StrictBool] = _key("Comfy.DevMode")
    show_missing_nodes_warning: Optional[StrictBool] = _key(
        "Comfy.Workflow.ShowMissingNodesWarning"
    )
    show_missing_models_warning: Optional[StrictBool] = _key(
        "Comfy.Workflow.ShowMissingModelsWarning"
    )
    disable_float_rounding: Optional[StrictBool] = _key("Comfy.DisableFloatRounding")
    disable_sliders: Optional[StrictBool] = _key("Comfy.DisableSliders")
    dom_clipping_enabled: Optional[StrictBool] = _key("Comfy.DOMClippingEnabled")
    edit_attention_delta: Optional[Number] = _key("Comfy.EditAttention.Delta")
    enable_tooltips: Optional[StrictBool] = _key("Comfy.EnableTooltips")
    enable_workflow_view_restore: Optional[StrictBool] = _key(
        "Comfy.EnableWorkflowViewRestore"
    )
    float_rounding_precision: Optional[Number] = _key("Comfy.FloatRoundingPrecision")
    graph_zoom_speed: Optional[Number] = _key("Comfy.Graph.ZoomSpeed")
    invert_menu_scrolling: Optional[StrictBool] = _key("Comfy.InvertMenuScrolling")
    logging_enabled: Optional[StrictBool] = _key("Comfy.Logging.Enabled")
    node_library_bookmarks: Optional[FrozenList[StrictStr]] = _key(
        "Comfy.NodeLibrary.Bookmarks"
    )
    node_library_bookmarks_v2: Optional[FrozenList[StrictStr]] = _key(
        "Comfy.NodeLibrary.Bookmarks.V2"
    )
    node_library_bookmarks_customization: Optional[
        Dict[str, BookmarkCustomization]
    ] = _key("Comfy.NodeLibrary.BookmarksCustomization")
    node_input_conversion_submenus: Optional[StrictBool] = _key(
        "Comfy.NodeInputConversionSubmenus"
    )
    link_release_trigger: Optional[
        Literal["always", "hold shift", "NOT hold shift"]
    ] = _key("Comfy.NodeSearchBoxImpl.LinkReleaseTrigger")
    node_search_box_preview: Optional[StrictBool] = _key(
        "Comfy.NodeSearchBoxImpl.NodePreview"
    )
    node_search_box_impl: Optional[Literal["default", "simple"]] = _key(
        "Comfy.NodeSearchBoxImpl"
    )
    node_search_box_show_category: Optional[StrictBool] = _key(
        "Comfy.NodeSearchBoxImpl.ShowCategory"
    )
    node_suggestions_number: Optional[Number] = _key("Comfy.NodeSuggestions.number")
    show_deprecated_nodes: Optional[StrictBool] = _key("Comfy.Node.ShowDeprecated")
    show_experimental_nodes: Optional[StrictBool] = _key("Comfy.Node.ShowExperimental")
    preview_format: Optional[StrictStr] = _key("Comfy.PreviewFormat")
    prompt_filename: Optional[StrictBool] = _key("Comfy.PromptFilename")
    sidebar_location: Optional[Literal["left", "right"]] = _key("Comfy.Sidebar.Location")
    sidebar_size: Optional[Number] = _key("Comfy.Sidebar.Size")
    switch_user: Any = _key("Comfy.SwitchUser")
    snap_to_grid_size: Optional[Number] = _key("Comfy.SnapToGrid.GridSize")
    textarea_font_size: Optional[Number] = _key("Comfy.TextareaWidget.FontSize")
    textarea_spellcheck: Optional[StrictBool] = _key("Comfy.TextareaWidget.Spellcheck")
    use_new_menu: Any = _key("Comfy.UseNewMenu")
    validate_workflows: Optional[StrictBool] = _key("Comfy.Validation.Workflows")
    sort_node_id_on_save: Optional[StrictBool] = _key("Comfy.Workflow.SortNodeIdOnSave")
    queue_image_fit: Optional[Literal["contain", "cover"]] = _key("Comfy.Queue.ImageFit")
    download_allowed_sources: Optional[FrozenList[StrictStr]] = _key(
        "Comfy.Workflow.ModelDownload.AllowedSources"
    )
    download_allowed_suffixes: Optional[FrozenList[StrictStr]] = _key(
        "Comfy.Workflow.ModelDownload.AllowedSuffixes"
    )
    double_click_title_to_edit: Optional[StrictBool] = _key(
        "Comfy.Node.DoubleClickTitleToEdit"
    )
    unload_confirmation: Optional[StrictBool] = _key("Comfy.Window.UnloadConfirmation")

    def to_wire(self) -> Dict[str, Any]:
        """Dump the keys that were present, under their ``Comfy.*`` names."""
        declared = self.model_fields_set & set(type(self).model_fields)
        data = self.model_dump(by_alias=True, include=declared) if declared else {}
        data.update(self.model_extra or {})
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a setting by its wire key, known or not."""
        return self.to_wire().get(key, default)


KNOWN_SETTING_KEYS = frozenset(
    field.alias for field in Settings.model_fields.values() if field.alias
)

__all__ = ["ColorPalette", "BookmarkCustomization", "Settings", "KNOWN_SETTING_KEYS"]

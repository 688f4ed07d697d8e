"""Per-component-type builders.

Each builder maps a parameter set onto a RenderSpec. Builders are registered
by component type; unknown types fall back to the generic builder.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from dataclasses import dataclass

from forge_core.catalogue import GENERIC_COMPONENT
from forge_core.schemas import AnalysisJob, ParameterSet

from .render_spec import Expr, Node, Prop, RenderSpec, StyleValue, Text
from .renderer import js_string, ts_literal


@dataclass(frozen=True)
class BuildContext:
    name: str
    component_type: str
    element_type: str
    element_id: str
    params: ParameterSet


Builder = Callable[[BuildContext], RenderSpec]

_BUILDERS: dict[str, Builder] = {}

CLASS_NAME = Prop("className", "string", "''")
CHILDREN = Prop("children", "React.ReactNode")


def register(component_type: str) -> Callable[[Builder], Builder]:
    def decorator(builder: Builder) -> Builder:
        _BUILDERS[component_type] = builder
        return builder

    return decorator


def registered_types() -> tuple[str, ...]:
    return tuple(_BUILDERS)


def build_render_spec(ctx: BuildContext) -> RenderSpec:
    builder = _BUILDERS.get(ctx.component_type, _BUILDERS[GENERIC_COMPONENT])
    return builder(ctx)


def _box(params: ParameterSet) -> dict[str, StyleValue]:
    return {
        "width": f"{params.width}px",
        "height": f"{params.height}px",
        "backgroundColor": params.background_color,
        "border": params.border,
        "borderRadius": params.border_radius,
        "padding": params.padding,
        "margin": params.margin,
    }


def _typography(params: ParameterSet) -> dict[str, StyleValue]:
    return {
        "color": params.text_color,
        "fontSize": params.font_size,
        "fontWeight": params.font_weight,
    }


def _statement(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


@register("ChartComponent")
def build_chart(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    effect = _statement(
        f"""
        const canvasRef = useRef<HTMLCanvasElement>(null);
        const chartRef = useRef<any>(null);

        useEffect(() => {{
          const Chart = (window as any).Chart;
          if (!canvasRef.current || !Chart) return;
          if (chartRef.current) {{
            chartRef.current.destroy();
          }}
          chartRef.current = new Chart(canvasRef.current, {{
            type: data.type || 'line',
            data: {{
              labels: data.labels || [],
              datasets: [{{
                label: title || 'Data',
                data: data.values || [],
                borderColor: {js_string(p.color)},
                backgroundColor: 'transparent',
                borderWidth: 2
              }}]
            }},
            options: {{
              responsive: true,
              maintainAspectRatio: false,
              plugins: {{ title: {{ display: !!title, text: title }} }},
              scales: {{ y: {{ beginAtZero: true }} }}
            }}
          }});
          return () => {{
            if (chartRef.current) {{
              chartRef.current.destroy();
            }}
          }};
        }}, [data, title]);
        """
    )
    heading = Node(
        "h3",
        style={**_typography(p), "margin": "0 0 16px 0"},
        children=(Expr("title"),),
        when="title",
    )
    canvas = Node(
        "div",
        style={"width": "100%", "height": "200px", "position": "relative"},
        children=(
            Node("canvas", attrs={"ref": Expr("canvasRef")}, style={"width": "100%", "height": "100%"}),
        ),
    )
    root = Node(
        "div",
        class_name="chart-container",
        style={
            **_box(p),
            "display": "flex",
            "flexDirection": "column",
            "alignItems": "center",
            "justifyContent": "center",
        },
        children=(heading, canvas),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("data", "any", ts_literal(p.data)),
            Prop("title", "string", ts_literal(p.title)),
            CLASS_NAME,
        ),
        root=root,
        hooks=("useEffect", "useRef"),
        statements=(effect,),
    )


@register("CardComponent")
def build_card(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    root = Node(
        "div",
        class_name="card",
        style={
            **_box(p),
            "boxShadow": "0 2px 4px rgba(0,0,0,0.1)",
            "display": "flex",
            "flexDirection": "column",
            "justifyContent": "center",
        },
        children=(
            Node("h4", style={**_typography(p), "margin": "0 0 8px 0"}, children=(Expr("title"),), when="title"),
            Node(
                "div",
                style={"color": p.color, "fontSize": "24px", "fontWeight": "bold"},
                children=(Expr("value"),),
                when="value",
            ),
            Expr("children"),
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("title", "string", ts_literal(p.title)),
            Prop("value", "string | number", ts_literal(p.value)),
            CLASS_NAME,
            CHILDREN,
        ),
        root=root,
    )


@register("TableComponent")
def build_table(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    rows = p.data if isinstance(p.data, list) else []
    header_cell = Node(
        "th",
        attrs={"key": Expr("index")},
        style={
            "padding": "12px",
            "textAlign": "left",
            "borderBottom": "1px solid #ddd",
            "fontWeight": p.font_weight,
            "color": p.text_color,
        },
        children=(Expr("column"),),
        each="columns",
        item="column",
    )
    cell = Node(
        "td",
        attrs={"key": Expr("colIndex")},
        style={"padding": "12px", "borderBottom": "1px solid #eee", "color": p.text_color},
        children=(Expr("row[column]"),),
        each="columns",
        item="column",
        index="colIndex",
    )
    row = Node(
        "tr",
        attrs={"key": Expr("rowIndex")},
        style={"backgroundColor": Expr("rowIndex % 2 === 0 ? 'white' : '#f9f9f9'")},
        children=(cell,),
        each="data",
        item="row",
        index="rowIndex",
    )
    table = Node(
        "table",
        style={"width": "100%", "borderCollapse": "collapse", "fontSize": p.font_size},
        children=(
            Node("thead", children=(Node("tr", style={"backgroundColor": "#f5f5f5"}, children=(header_cell,)),)),
            Node("tbody", children=(row,)),
        ),
    )
    root = Node("div", class_name="table-container", style={**_box(p), "overflow": "auto"}, children=(table,))
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("data", "Array<Record<string, any>>", ts_literal(rows)),
            Prop("columns", "string[]", ts_literal(p.columns)),
            CLASS_NAME,
        ),
        root=root,
    )


@register("ButtonComponent")
def build_button(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    hover = f"(e) => {{ if (!disabled) e.currentTarget.style.backgroundColor = {js_string(p.color)}; }}"
    leave = (
        f"(e) => {{ if (!disabled) e.currentTarget.style.backgroundColor = "
        f"{js_string(p.background_color)}; }}"
    )
    root = Node(
        "button",
        class_name="button",
        attrs={
            "onClick": Expr("onClick"),
            "disabled": Expr("disabled"),
            "onMouseEnter": Expr(hover),
            "onMouseLeave": Expr(leave),
        },
        style={
            **_box(p),
            **_typography(p),
            "cursor": Expr("disabled ? 'not-allowed' : 'pointer'"),
            "opacity": Expr("disabled ? 0.6 : 1"),
            "transition": "all 0.2s ease",
        },
        children=(Expr("children"),),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("children", "React.ReactNode", ts_literal(p.text or p.title or "Button")),
            Prop("onClick", "() => void"),
            Prop("disabled", "boolean", "false"),
            CLASS_NAME,
        ),
        root=root,
    )


@register("HeaderComponent")
def build_header(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    root = Node(
        "header",
        class_name="header",
        style={
            **_box(p),
            "color": p.text_color,
            "display": "flex",
            "alignItems": "center",
            "justifyContent": "space-between",
        },
        children=(
            Node(
                "h1",
                style={"fontSize": p.font_size, "fontWeight": p.font_weight, "margin": "0", "color": p.color},
                children=(Expr("title"),),
            ),
            Expr("children"),
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("title", "string", ts_literal(p.title or p.text or "Header")),
            CLASS_NAME,
            CHILDREN,
        ),
        root=root,
    )


@register("NavigationComponent")
def build_navigation(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    items = p.data if isinstance(p.data, list) else []
    link = Node(
        "a",
        attrs={"key": Expr("index"), "href": Expr("item.href")},
        style={
            "color": Expr(f"item.active ? {js_string(p.color)} : {js_string(p.text_color)}"),
            "textDecoration": "none",
            "fontSize": p.font_size,
            "fontWeight": Expr(f"item.active ? 'bold' : {js_string(p.font_weight)}"),
            "padding": "8px 16px",
            "borderRadius": p.border_radius,
            "backgroundColor": Expr("item.active ? 'rgba(0,0,0,0.1)' : 'transparent'"),
            "transition": "all 0.2s ease",
        },
        children=(Expr("item.label"),),
        each="items",
    )
    root = Node(
        "nav",
        class_name="navigation",
        style={**_box(p), "display": "flex", "alignItems": "center", "gap": "24px"},
        children=(link,),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            Prop("items", "Array<{ label: string; href: string; active?: boolean }>", ts_literal(items)),
            CLASS_NAME,
        ),
        root=root,
    )


@register("SidebarComponent")
def build_sidebar(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    toolbar = Node(
        "div",
        style={
            "padding": "16px",
            "borderBottom": "1px solid #eee",
            "display": "flex",
            "justifyContent": "space-between",
            "alignItems": "center",
        },
        children=(
            Node("h3", style={"margin": "0", "fontSize": "18px"}, children=(Text(p.title or "Sidebar"),)),
            Node(
                "button",
                attrs={"onClick": Expr("onToggle")},
                style={"background": "none", "border": "none", "fontSize": "20px", "cursor": "pointer"},
                children=(Expr("isOpen ? '×' : '☰'"),),
                when="onToggle",
            ),
        ),
    )
    root = Node(
        "aside",
        class_name="sidebar",
        style={
            **_box(p),
            **_typography(p),
            "display": "flex",
            "flexDirection": "column",
            "position": "relative",
            "boxShadow": "2px 0 5px rgba(0,0,0,0.1)",
            "transform": Expr("isOpen ? 'translateX(0)' : 'translateX(-100%)'"),
            "transition": "transform 0.3s ease",
        },
        children=(toolbar, Node("div", style={"flex": Expr("1"), "padding": "16px"}, children=(Expr("children"),))),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(CLASS_NAME, CHILDREN, Prop("isOpen", "boolean", "true"), Prop("onToggle", "() => void")),
        root=root,
    )


def _form_field(label: str, input_type: str, name: str) -> Node:
    return Node(
        "div",
        children=(
            Node(
                "label",
                style={"display": "block", "marginBottom": "4px", "fontWeight": "bold"},
                children=(Text(label),),
            ),
            Node(
                "input",
                attrs={"type": input_type, "name": name, "onChange": Expr("handleChange")},
                style={
                    "width": "100%",
                    "padding": "8px",
                    "border": "1px solid #ddd",
                    "borderRadius": "4px",
                    "fontSize": "14px",
                },
            ),
        ),
    )


@register("FormComponent")
def build_form(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    handlers = _statement(
        """
        const [formData, setFormData] = useState<Record<string, string>>({});

        const handleSubmit = (e: React.FormEvent) => {
          e.preventDefault();
          if (onSubmit) {
            onSubmit(formData);
          }
        };

        const handleChange = (e: React.ChangeEvent<HTMLInputElement>) => {
          setFormData({ ...formData, [e.target.name]: e.target.value });
        };
        """
    )
    submit = Node(
        "button",
        attrs={"type": "submit"},
        style={
            "padding": "12px 24px",
            "backgroundColor": p.color,
            "color": "#ffffff",
            "border": "none",
            "borderRadius": p.border_radius,
            "cursor": "pointer",
        },
        children=(Text(p.text or "Submit"),),
    )
    root = Node(
        "form",
        class_name="form",
        attrs={"onSubmit": Expr("handleSubmit")},
        style={**_box(p), **_typography(p), "display": "flex", "flexDirection": "column", "gap": "16px"},
        children=(
            Node("h3", style={"margin": "0 0 16px 0", "textAlign": "center"}, children=(Text(p.title or "Form"),)),
            _form_field("Name:", "text", "name"),
            _form_field("Email:", "email", "email"),
            Expr("children"),
            submit,
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(CLASS_NAME, Prop("onSubmit", "(data: Record<string, string>) => void"), CHILDREN),
        root=root,
        hooks=("useState",),
        statements=(handlers,),
    )


@register("InputComponent")
def build_input(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    handlers = _statement(
        """
        const [inputValue, setInputValue] = useState(value);

        const handleChange = (e: React.ChangeEvent<HTMLInputElement>) => {
          setInputValue(e.target.value);
          if (onChange) {
            onChange(e.target.value);
          }
        };
        """
    )
    root = Node(
        "div",
        class_name="input-container",
        style={
            "width": f"{p.width}px",
            "height": f"{p.height}px",
            "display": "flex",
            "flexDirection": "column",
            "gap": "8px",
        },
        children=(
            Node("label", style={**_typography(p), "marginBottom": "4px"}, children=(Expr("label"),), when="label"),
            Node(
                "input",
                attrs={
                    "type": Expr("type"),
                    "value": Expr("inputValue"),
                    "onChange": Expr("handleChange"),
                    "placeholder": Expr("placeholder"),
                },
                style={
                    "width": "100%",
                    "height": "40px",
                    "padding": "8px 12px",
                    "border": p.border,
                    "borderRadius": p.border_radius,
                    "fontSize": p.font_size,
                    "backgroundColor": p.background_color,
                    "color": p.text_color,
                    "outline": "none",
                },
            ),
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            CLASS_NAME,
            Prop("placeholder", "string", ts_literal(p.text or "Enter text...")),
            Prop("type", "string", "'text'"),
            Prop("value", "string", ts_literal(str(p.value))),
            Prop("onChange", "(value: string) => void"),
            Prop("label", "string", ts_literal(p.title)),
        ),
        root=root,
        hooks=("useState",),
        statements=(handlers,),
    )


@register("TextComponent")
def build_text(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    root = Node(
        "p",
        class_name="text-component",
        style={
            **_box(p),
            **_typography(p),
            "textAlign": Expr("align"),
            "lineHeight": "1.5",
            "display": "flex",
            "alignItems": "center",
        },
        children=(Expr("children || text"),),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            CLASS_NAME,
            CHILDREN,
            Prop("text", "string", ts_literal(p.text or p.title or "Sample text content")),
            Prop("align", "'left' | 'center' | 'right' | 'justify'", "'left'"),
        ),
        root=root,
    )


@register("ImageComponent")
def build_image(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    source = p.data.get("src", "") if isinstance(p.data, dict) else ""
    handlers = _statement(
        """
        const [isLoading, setIsLoading] = useState(true);
        const [hasError, setHasError] = useState(false);

        const handleLoad = () => setIsLoading(false);
        const handleError = () => {
          setIsLoading(false);
          setHasError(true);
        };
        """
    )
    overlay = {
        "position": "absolute",
        "top": "50%",
        "left": "50%",
        "transform": "translate(-50%, -50%)",
        "color": p.text_color,
        "fontSize": p.font_size,
    }
    root = Node(
        "div",
        class_name="image-container",
        attrs={"onClick": Expr("onClick")},
        style={
            **_box(p),
            "display": "flex",
            "alignItems": "center",
            "justifyContent": "center",
            "position": "relative",
            "overflow": "hidden",
            "cursor": Expr("onClick ? 'pointer' : 'default'"),
        },
        children=(
            Node("div", style=overlay, children=(Text("Loading..."),), when="isLoading"),
            Node(
                "img",
                attrs={
                    "src": Expr("src"),
                    "alt": Expr("alt"),
                    "onLoad": Expr("handleLoad"),
                    "onError": Expr("handleError"),
                },
                style={
                    "width": "100%",
                    "height": "100%",
                    "objectFit": "cover",
                    "borderRadius": p.border_radius,
                    "display": Expr("isLoading ? 'none' : 'block'"),
                },
            ),
            Node("div", style={**overlay, "textAlign": "center"}, children=(Text("Image failed to load"),), when="hasError"),
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            CLASS_NAME,
            Prop("src", "string", ts_literal(source)),
            Prop("alt", "string", ts_literal(p.title or p.text or "Image")),
            Prop("onClick", "() => void"),
        ),
        root=root,
        hooks=("useState",),
        statements=(handlers,),
    )


@register("ContainerComponent")
def build_container(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    root = Node(
        "div",
        class_name="container",
        style={
            **_box(p),
            **_typography(p),
            "display": "flex",
            "flexDirection": Expr("direction"),
            "justifyContent": Expr("justify"),
            "alignItems": Expr("align"),
            "boxSizing": "border-box",
        },
        children=(Expr("children"),),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(
            CLASS_NAME,
            CHILDREN,
            Prop("direction", "'row' | 'column'", "'column'"),
            Prop("justify", "React.CSSProperties['justifyContent']", "'flex-start'"),
            Prop("align", "React.CSSProperties['alignItems']", "'flex-start'"),
        ),
        root=root,
    )


@register(GENERIC_COMPONENT)
def build_generic(ctx: BuildContext) -> RenderSpec:
    p = ctx.params
    root = Node(
        "div",
        class_name="generic-component",
        style={
            **_box(p),
            **_typography(p),
            "display": "flex",
            "flexDirection": "column",
            "alignItems": "center",
            "justifyContent": "center",
        },
        children=(
            Node("p", style={"margin": "0 0 8px 0", "fontWeight": "bold"}, children=(Text(f"{ctx.element_type.upper()} Component"),)),
            Node("p", style={"margin": "0", "fontSize": "12px"}, children=(Text(f"ID: {ctx.element_id}"),)),
            Expr("children"),
        ),
    )
    return RenderSpec(
        name=ctx.name,
        component_type=ctx.component_type,
        props=(CLASS_NAME, CHILDREN),
        root=root,
    )


def build_aggregator_spec(name: str, job: AnalysisJob, component_names: list[str]) -> RenderSpec:
    """Root layout that mounts every generated component, styled from the job summary."""
    colors, typography, layout = job.colors, job.typography, job.layout
    root = Node(
        "div",
        class_name="main-component",
        style={
            "width": "100%",
            "minHeight": "100vh",
            "backgroundColor": colors.background or "#ffffff",
            "color": colors.text or "#000000",
            "fontFamily": typography.primary_font or "Roboto, sans-serif",
            "fontSize": typography.primary_size or "14px",
            "lineHeight": typography.line_height or "1.5",
            "padding": layout.padding or "24px",
            "display": "grid" if layout.type == "grid" else "flex",
            "flexDirection": layout.direction or "column",
            "gap": layout.gap or "16px",
            "justifyContent": layout.justify_content or "flex-start",
            "alignItems": layout.align_items or "flex-start",
        },
        children=tuple(Node(component) for component in component_names),
    )
    return RenderSpec(
        name=name,
        component_type="MainComponent",
        props=(CLASS_NAME,),
        root=root,
        imports=tuple(component_names),
    )

import streamlit as st
import numpy as np
import folium
import plotly.express as px
import plotly.graph_objects as go
from branca.element import Template, MacroElement
from folium.features import GeoJson, GeoJsonTooltip
from streamlit_folium import st_folium

from co2twin import config
from co2twin.geocode import GeocodeError, search_location
from co2twin.grid import FactorSet, emission_matrix, grid_center, grid_frame
from co2twin.interventions import CATALOG, UnsuitableInterventionError, current_emission, is_suitable, placements
from co2twin.kpi import emissions_by_category, historical_series, percent_change
from co2twin.projection import GrowthRates, projection_frame, sector_shares, summarize_projection
from co2twin.scheduler import DeferredRecompute
from co2twin.state import TwinState

st.set_page_config(page_title="VayuVision — CO₂ Digital Twin", layout="wide")
st.title("VayuVision")
st.caption("Simulate, visualize, and plan carbon capture strategies for urban neighborhoods")


# Session state: one generator, one TwinState snapshot
if "rng" not in st.session_state:
    st.session_state["rng"] = np.random.default_rng(config.SEED)
rng = st.session_state["rng"]
if "twin" not in st.session_state:
    st.session_state["twin"] = TwinState.new(rng)
if "selected_cell" not in st.session_state:
    st.session_state["selected_cell"] = None


def twin() -> TwinState:
    return st.session_state["twin"]


def commit(new_state: TwinState):
    st.session_state["twin"] = new_state


# Utils
def _parse_cell_id(raw):
    try:
        x, y = str(raw).split("-")
        return int(x), int(y)
    except ValueError:
        return None


def build_map(state: TwinState):
    current = {c.cell_id: current_emission(c) for c in state.cells}
    g = grid_frame(state.cells, current=current)

    m = folium.Map(location=grid_center(), zoom_start=config.MAP_ZOOM, tiles="OpenStreetMap")

    def _style(feat):
        return {
            "fillColor": feat["properties"].get("color", "#22c55e"),
            "color": "#ffffff",
            "weight": 0.7,
            "fillOpacity": 0.35,
        }

    tip_cols = ["cell_id", "category", "emission", "current_emission", "interventions"]
    GeoJson(
        g.to_json(),
        name="Cell emissions",
        style_function=_style,
        highlight_function=lambda f: {"weight": 2, "color": "#111"},
        tooltip=GeoJsonTooltip(fields=tip_cols, aliases=tip_cols, localize=True),
    ).add_to(m)

    if state.location is not None:
        folium.Marker(
            [state.location.lat, state.location.lon],
            popup=state.location.name,
            icon=folium.Icon(color="blue"),
        ).add_to(m)

    items = "".join(
        f'<div style="display:flex;align-items:center;gap:4px;font-size:12px;">'
        f'<span style="width:12px;height:12px;background:{color};display:inline-block;border-radius:2px;"></span>'
        f"{label}</div>"
        for _, color, label in reversed(config.EMISSION_BINS)
    )
    legend_html = f"""
{{% macro html(this, kwargs) %}}
<div style="position: fixed; bottom: 40px; left: 20px; z-index: 9999;
            background: white; padding: 10px 12px; border: 1px solid #999; border-radius: 8px;">
  <b>CO₂ (tons/year)</b>
  {items}
</div>
{{% endmacro %}}
"""
    macro = MacroElement()
    macro._template = Template(legend_html)
    m.get_root().add_child(macro)
    folium.LayerControl(collapsed=True).add_to(m)
    return m


def render_map(state: TwinState, key: str):
    out = st_folium(build_map(state), use_container_width=True, height=560,
                    returned_objects=["last_active_drawing"], key=key)
    feat = (out or {}).get("last_active_drawing")
    if feat:
        cid = _parse_cell_id(feat.get("properties", {}).get("cell_id"))
        if cid is not None:
            st.session_state["selected_cell"] = cid


# Sidebar
st.sidebar.header("Scenario")
st.sidebar.markdown(f"**{twin().scenario}**")
st.sidebar.caption(f"{len(twin().cells)} cells · {len(placements(twin().cells))} interventions placed")
if st.sidebar.button("New synthetic grid"):
    commit(TwinState.new(rng))
    st.session_state["selected_cell"] = None
    for name in FactorSet.names():
        st.session_state.pop(f"factor_{name}", None)
    st.toast("Generated a new synthetic grid")

tab_dash, tab_map, tab_sim, tab_pred = st.tabs(["Dashboard", "Interactive Map", "Simulation", "Prediction"])

# Dashboard
with tab_dash:
    state = twin()
    cur, base = state.kpis, state.baseline

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Emissions (tons CO₂/yr)", f"{cur.total_emissions:.1f}",
              delta=f"{percent_change(cur.total_emissions, base.total_emissions):.1f}% vs baseline",
              delta_color="inverse" if cur.total_emissions < base.total_emissions else "off")
    c2.metric("Reduction", f"{cur.emission_reduction:.1f}%",
              delta=f"{cur.projected_savings:.0f} tons saved")
    c3.metric("Avg. Intervention Efficiency", f"{cur.intervention_efficiency:.1f}%")
    roi = f"ROI: {100 / cur.cost_effectiveness:.0f}%" if cur.cost_effectiveness else "ROI: n/a"
    c4.metric("Hotspots remaining", cur.hotspot_count,
              delta=f"{cur.hotspot_count - base.hotspot_count:+d}", delta_color="inverse")
    st.caption(f"Cost-effectiveness: ${cur.cost_effectiveness:,.0f} per ton · {roi} · "
               f"total spend ${cur.total_cost:,.0f}")

    hist = historical_series(base.total_emissions, cur.total_emissions, cur.intervention_count)
    by_type = emissions_by_category(state.cells)

    r1a, r1b = st.columns(2)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=hist["year"], y=hist["emissions"], name="CO₂ Emissions",
                             line=dict(color="#ef4444", width=2)))
    fig.add_trace(go.Scatter(x=hist["year"], y=hist["interventions"], name="Interventions",
                             yaxis="y2", line=dict(color="#22c55e", width=2)))
    fig.update_layout(title="Emission trend", xaxis_title="Year",
                      yaxis_title="CO₂ Emissions (tons/year)",
                      yaxis2=dict(overlaying="y", side="right", title="Interventions"))
    r1a.plotly_chart(fig, use_container_width=True)

    bars = by_type.melt(id_vars="type", value_vars=["baseline", "current"],
                        var_name="scenario", value_name="tons")
    r1b.plotly_chart(px.bar(bars, x="type", y="tons", color="scenario", barmode="group",
                            title="Emissions by source",
                            labels={"type": "Emission Source", "tons": "Emissions (tons/year)"}),
                     use_container_width=True)

    r2a, r2b = st.columns(2)
    r2a.plotly_chart(px.pie(by_type, names="type", values="current", title="Current distribution"),
                     use_container_width=True)
    saved = hist.assign(saved=hist["interventions"])
    r2b.plotly_chart(px.line(saved, x="year", y="saved", title="Interventions over time",
                             labels={"saved": "Interventions", "year": "Year"}),
                     use_container_width=True)

    st.plotly_chart(px.imshow(emission_matrix(state.cells), color_continuous_scale="YlOrRd",
                              labels={"x": "Column", "y": "Row", "color": "tons CO₂/yr"},
                              title="Cell emission heatmap"),
                    use_container_width=True)

# Interactive map
with tab_map:
    left, right = st.columns([2, 1])
    with left:
        st.subheader("Neighborhood CO₂ Emissions Map")
        render_map(twin(), key="map_tab_map")

    with right:
        st.subheader("Interventions")
        ids = [f"{c.x}-{c.y}" for c in twin().cells]
        sel = st.session_state["selected_cell"]
        idx = ids.index(f"{sel[0]}-{sel[1]}") if sel and f"{sel[0]}-{sel[1]}" in ids else 0
        picked = _parse_cell_id(st.selectbox("Cell", ids, index=idx))
        st.session_state["selected_cell"] = picked
        cell = twin().cell(picked)
        if cell is not None:
            st.markdown(f"**{cell.category.value.title()}** · {cell.emission:.1f} t → "
                        f"{current_emission(cell):.1f} t after interventions")

            options = [i for i in CATALOG.values() if is_suitable(i, cell.category)]
            if options:
                choice = st.selectbox("Intervention", options,
                                      format_func=lambda i: f"{i.icon} {i.name} (-{i.efficiency}%, ${i.cost:,})")
                with st.expander("Intervention details"):
                    st.write(choice.description)
                    st.write("Suitable for: " + ", ".join(sorted(c.value for c in choice.suitable_for)))
                if st.button("Place intervention"):
                    try:
                        commit(twin().place(cell.cell_id, choice.id))
                    except (KeyError, UnsuitableInterventionError) as e:
                        st.error(str(e))
                    else:
                        st.toast(f"{choice.name} placed successfully!")
                        st.rerun()
            else:
                st.info("No catalog intervention suits this cell.")

        placed = placements(twin().cells)
        st.markdown(f"#### Placed ({len(placed)})")
        for n, p in enumerate(placed):
            itype = CATALOG.get(p.intervention_id)
            label = itype.name if itype else p.intervention_id
            a, b = st.columns([3, 1])
            a.write(f"{label} @ {p.cell_id[0]}-{p.cell_id[1]} (-{p.efficiency:.0f}%)")
            if b.button("Remove", key=f"rm_{n}_{p.cell_id}_{p.intervention_id}"):
                commit(twin().remove(p.cell_id, p.intervention_id))
                st.toast("Intervention removed")
                st.rerun()

# Simulation
with tab_sim:
    controls, view = st.columns([1, 2])
    with controls:
        st.subheader("Emission Factors")
        st.caption(twin().scenario)
        for name in FactorSet.names():
            current_value = getattr(twin().factors, name)
            v = st.slider(config.FACTOR_LABELS[name], config.FACTOR_MIN, config.FACTOR_MAX,
                          int(current_value), step=config.FACTOR_STEP, key=f"factor_{name}")
            if v != current_value:
                commit(twin().with_factor(name, v, rng))

        b1, b2, b3 = st.columns(3)
        if b1.button("Run simulation"):
            job = DeferredRecompute(config.RECOMPUTE_DELAY_S)
            job.schedule(twin().run_simulation, rng)
            try:
                with st.spinner("Recalculating emissions and generating recommendations..."):
                    new_state = job.wait()
            except Exception as e:
                st.error(f"Simulation failed: {e}")
            else:
                if new_state is not None:
                    commit(new_state)
                    st.toast("Recommendations generated successfully!")
        if b2.button("Reset"):
            commit(twin().reset_factors(rng))
            for name in FactorSet.names():
                st.session_state.pop(f"factor_{name}", None)
            st.toast("Parameters reset to default")
            st.rerun()
        if b3.button("Save scenario"):
            commit(twin().save_scenario())
            st.toast('Scenario saved as "Custom Scenario"')

    with view:
        render_map(twin(), key="map_tab_sim")
        recs = twin().recommendations
        if recs:
            st.markdown("#### Recommendations")
            for r in recs:
                st.markdown(f"**{r.intervention}** — cell {r.cell_id[0]}-{r.cell_id[1]} "
                            f"({r.category.value}, {r.emission:.1f} t) · est. -{r.reduction_percent}%")
                st.caption(r.explanation)

# Prediction
with tab_pred:
    left, right = st.columns(2)
    with left:
        st.subheader("CO₂ Prediction Model")
        q = st.text_input("Location Search", placeholder="Enter location...")
        if st.button("Search"):
            try:
                loc = search_location(q)
                commit(twin().with_location(loc))
                st.toast(f"Location selected: {loc.name}")
            except GeocodeError as e:
                st.error(str(e))
        if twin().location is not None:
            st.caption(f"📍 {twin().location.name} ({twin().location.lat:.4f}, {twin().location.lon:.4f})")

        rates = {}
        for name in config.GROWTH_ORDER:
            rates[name] = st.slider(f"{name.title()} Growth (%)", 0.0, config.GROWTH_MAX[name],
                                    float(getattr(twin().growth, name)), step=config.GROWTH_STEP,
                                    key=f"growth_{name}")
        commit(twin().with_growth(GrowthRates(**rates)))
        years = st.number_input("Prediction Years", min_value=config.MIN_YEARS,
                                max_value=config.MAX_YEARS, value=twin().years, step=1)
        commit(twin().with_years(years))

        if st.button("Run prediction"):
            try:
                commit(twin().predict(rng))
                st.toast("Prediction complete! 🎉")
            except ValueError as e:
                st.error(str(e))

    with right:
        state = twin()
        if state.projection:
            summary = summarize_projection(state.projection, state.projection_start, state.growth)
            s1, s2 = st.columns(2)
            s1.metric("Final year emission", f"{summary.final_year_emission:.1f} t")
            s2.metric("Avg. growth / year", f"{summary.average_growth_rate:.2f}%")
            s3, s4 = st.columns(2)
            s3.metric("Highest contributing sector", summary.highest_contributing_sector)
            s4.metric("Confidence", f"{summary.confidence_score:.0f}%")

            df = projection_frame(state.projection)
            st.plotly_chart(px.line(df, x="year", y="emission", markers=True,
                                    title="Projected CO₂ emissions",
                                    labels={"emission": "CO₂ (tons/year)", "year": "Year"}),
                            use_container_width=True)
            shares = sector_shares(summary.final_year_emission, state.growth)
            st.plotly_chart(px.pie(shares, names="sector", values="emission", color="sector",
                                   color_discrete_map=dict(zip(shares["sector"], shares["color"])),
                                   title="Sector contributions (final year)"),
                            use_container_width=True)
            st.dataframe(df.assign(emission=df["emission"].round(2)), hide_index=True)
        else:
            st.info("Select a location, set growth rates, and run a prediction.")

# Notes / Help
st.markdown("### How to read this dashboard")
st.markdown(
"""
* **Grid cells** are synthetic; each has a category (residential, industrial, commercial, transport) and a yearly CO₂ value.
* **Emission factors** scale every cell's emission; the run button recomputes the grid and suggests interventions for the top emitters.
* **Hotspots** are cells above 30 t CO₂/yr after interventions.
* **Prediction** averages 500 randomized runs per year; the confidence score is a simple spread heuristic, not a statistical interval.
"""
)

# gestao_recursos_app.py
import logging

import matplotlib.pyplot as plt
import streamlit as st

from reports import (
    EXPORT_FILENAME,
    EXPORT_MIME,
    cost_series,
    format_money,
    material_distribution,
    materials_frame,
    productions_frame,
)
from resources import ResourceState, ValidationError
from storage import DATA_DIR, JsonFileStore

# ----------------------------
# Config
# ----------------------------
st.set_page_config(page_title="Gestão de Recursos", page_icon="🏭", layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

COLORS = ["#4F46E5", "#06B6D4", "#F59E0B", "#EF4444", "#10B981"]

EMPTY_MATERIAL = {"id": None, "name": "", "unit": "", "unitPrice": "", "quantityOnHand": ""}
EMPTY_PRODUCTION = {
    "id": None, "name": "", "date": "", "materialCost": "", "laborCost": "", "otherCost": "", "unitsProduced": ""
}

# ----------------------------
# State (one ResourceState per browser session)
# ----------------------------
if "resources" not in st.session_state:
    st.session_state.resources = ResourceState(JsonFileStore(DATA_DIR))
    logger.info(f"Session started with data dir {DATA_DIR}")
state: ResourceState = st.session_state.resources


def as_text(value) -> str:
    return "" if value is None else str(value)


def record_label(record) -> str:
    return f"#{record['id']} - {record['name']}" if record else ""


def show_persistence_warnings():
    for msg in state.persistence_warnings():
        st.warning(msg)


# ----------------------------
# Destructive actions (button callbacks; each one consumes its confirmation)
# ----------------------------
def flash(kind: str, msg: str):
    st.session_state["flash"] = (kind, msg)


def show_flash():
    if "flash" in st.session_state:
        kind, msg = st.session_state.pop("flash")
        getattr(st, kind)(msg)


def remove_record(collection, select_key: str, confirm_key: str, done_msg: str):
    record_id = st.session_state.get(select_key)
    confirmed = bool(st.session_state.get(confirm_key))
    st.session_state[confirm_key] = False
    if record_id is None:
        flash("error", "Escolha um registro para remover.")
    elif not confirmed:
        flash("warning", "Marque a confirmação para remover.")
    elif collection.delete(record_id, confirm=lambda: confirmed):
        flash("success", done_msg)


def clear_all_data():
    confirmed = bool(st.session_state.get("clear_confirm"))
    st.session_state["clear_confirm"] = False
    if not confirmed:
        flash("warning", "Marque a confirmação para apagar os dados.")
    else:
        state.clear_all()
        flash("success", "Dados locais apagados.")


# ----------------------------
# Navigation
# ----------------------------
SECTIONS = ["📊 Dashboard", "🧱 Materiais", "🏭 Produção", "⚙️ Configurações & Export"]
st.sidebar.title("Gestão de Recursos")
st.sidebar.caption("Gerencie materiais e custos de produção")
section = st.sidebar.selectbox("Seção", SECTIONS, key="section")

# ----------------------------
# Dashboard
# ----------------------------
if section == "📊 Dashboard":
    st.title("📊 Dashboard")
    totals = state.summary()
    c1, c2, c3 = st.columns(3)
    c1.metric("Valor total em materiais", format_money(totals["total_value"]))
    c2.metric("Custos totais de produção", format_money(totals["total_cost"]))
    c3.metric("Produções registradas", f"{totals['production_count']}")

    st.markdown("---")
    left, right = st.columns([2, 1])
    with left:
        st.subheader("Custo por lote")
        st.line_chart(cost_series(state.productions.records), x="name", y="cost")
    with right:
        st.subheader("Distribuição do valor dos materiais")
        dist = material_distribution(state.materials.records)
        if not dist.empty and dist["value"].sum() > 0:
            fig, ax = plt.subplots()
            ax.pie(
                dist["value"],
                labels=dist["name"],
                colors=[COLORS[i % len(COLORS)] for i in range(len(dist))],
                autopct="%1.1f%%",
                startangle=90,
                wedgeprops={"width": 0.55},
            )
            ax.axis("equal")
            st.pyplot(fig)
            plt.close(fig)
        else:
            st.info("Cadastre materiais com preço e estoque para ver a distribuição.")

# ----------------------------
# Materials
# ----------------------------
elif section == "🧱 Materiais":
    st.title("🧱 Materiais")
    col_form, col_list = st.columns([1, 2])

    with col_form:
        st.subheader("Adicionar / Editar Material")
        options = [None] + [r["id"] for r in state.materials]
        selected = st.selectbox(
            "Material para editar (vazio = novo)",
            options,
            format_func=lambda i: "" if i is None else record_label(state.materials.get(i)),
        )
        current = state.materials.get(selected) if selected is not None else None
        current = current or EMPTY_MATERIAL

        with st.form(f"material_form_{selected}", clear_on_submit=True):
            name = st.text_input("Nome", value=as_text(current.get("name")), key=f"mat_name_{selected}")
            unit = st.text_input("Unidade (ex: kg, un)", value=as_text(current.get("unit")), key=f"mat_unit_{selected}")
            unit_price = st.text_input("Preço unitário", value=as_text(current.get("unitPrice")), key=f"mat_price_{selected}")
            quantity = st.text_input("Quantidade em estoque", value=as_text(current.get("quantityOnHand")), key=f"mat_qty_{selected}")
            submitted = st.form_submit_button("Salvar")
        if submitted:
            try:
                saved = state.materials.create_or_update({
                    "id": selected,
                    "name": name,
                    "unit": unit,
                    "unitPrice": unit_price,
                    "quantityOnHand": quantity,
                })
            except ValidationError as e:
                st.error(str(e))
            else:
                st.success(f"Material salvo: {record_label(saved)}")

        st.markdown("---")
        st.subheader("Remover Material")
        st.selectbox(
            "Material",
            [None] + [r["id"] for r in state.materials],
            format_func=lambda i: "" if i is None else record_label(state.materials.get(i)),
            key="mat_remove",
        )
        st.checkbox("Confirmo a remoção deste material", key="mat_remove_confirm")
        st.button(
            "Remover material",
            key="mat_remove_btn",
            on_click=remove_record,
            args=(state.materials, "mat_remove", "mat_remove_confirm", "Material removido."),
        )
        show_flash()

    with col_list:
        st.subheader("Lista de Materiais")
        df = materials_frame(state.materials.records)
        view = df.assign(
            unitPrice=df["unitPrice"].map(format_money),
            value=df["value"].map(format_money),
        ).rename(columns={
            "id": "ID", "name": "Nome", "unit": "Unidade", "unitPrice": "Preço unit.",
            "quantityOnHand": "Estoque", "value": "Valor total",
        })
        st.dataframe(view, hide_index=True)

# ----------------------------
# Productions
# ----------------------------
elif section == "🏭 Produção":
    st.title("🏭 Produções")
    col_form, col_list = st.columns([1, 2])

    with col_form:
        st.subheader("Registrar Produção")
        options = [None] + [r["id"] for r in state.productions]
        selected = st.selectbox(
            "Lote para editar (vazio = novo)",
            options,
            format_func=lambda i: "" if i is None else record_label(state.productions.get(i)),
        )
        current = state.productions.get(selected) if selected is not None else None
        current = current or EMPTY_PRODUCTION

        with st.form(f"production_form_{selected}", clear_on_submit=True):
            name = st.text_input("Nome do lote", value=as_text(current.get("name")), key=f"prod_name_{selected}")
            prod_date = st.text_input("Data (AAAA-MM-DD)", value=as_text(current.get("date")), key=f"prod_date_{selected}")
            material_cost = st.text_input("Custo material", value=as_text(current.get("materialCost")), key=f"prod_mat_{selected}")
            labor_cost = st.text_input("Custo mão de obra", value=as_text(current.get("laborCost")), key=f"prod_labor_{selected}")
            other_cost = st.text_input("Outros custos", value=as_text(current.get("otherCost")), key=f"prod_other_{selected}")
            units = st.text_input("Unidades produzidas", value=as_text(current.get("unitsProduced")), key=f"prod_units_{selected}")
            submitted = st.form_submit_button("Salvar")
        if submitted:
            try:
                saved = state.productions.create_or_update({
                    "id": selected,
                    "name": name,
                    "date": prod_date,
                    "materialCost": material_cost,
                    "laborCost": labor_cost,
                    "otherCost": other_cost,
                    "unitsProduced": units,
                })
            except ValidationError as e:
                st.error(str(e))
            else:
                st.success(f"Produção salva: {record_label(saved)}")

        st.markdown("---")
        st.subheader("Remover Produção")
        st.selectbox(
            "Lote",
            [None] + [r["id"] for r in state.productions],
            format_func=lambda i: "" if i is None else record_label(state.productions.get(i)),
            key="prod_remove",
        )
        st.checkbox("Confirmo a remoção desta produção", key="prod_remove_confirm")
        st.button(
            "Remover produção",
            key="prod_remove_btn",
            on_click=remove_record,
            args=(state.productions, "prod_remove", "prod_remove_confirm", "Produção removida."),
        )
        show_flash()

    with col_list:
        st.subheader("Lista de Produções")
        df = productions_frame(state.productions.records)
        money_cols = ["materialCost", "laborCost", "otherCost", "totalCost"]
        view = df.assign(**{c: df[c].map(format_money) for c in money_cols}).rename(columns={
            "id": "ID", "name": "Nome", "date": "Data", "materialCost": "Custo material",
            "laborCost": "Mão de obra", "otherCost": "Outros", "unitsProduced": "Unid.",
            "totalCost": "Custo total",
        })
        st.dataframe(view, hide_index=True)

# ----------------------------
# Settings & export
# ----------------------------
elif section == "⚙️ Configurações & Export":
    st.title("⚙️ Configurações & Export")
    st.subheader("Exportar CSV")
    st.download_button(
        "Exportar CSV",
        state.export_csv().encode("utf-8"),
        EXPORT_FILENAME,
        mime=EXPORT_MIME,
    )

    st.markdown("---")
    st.subheader("Limpar todos dados locais")
    st.checkbox("Confirmo que quero apagar materiais e produções", key="clear_confirm")
    st.button("Limpar todos dados locais", key="clear_btn", on_click=clear_all_data)
    show_flash()
    st.caption(f"Os dados são salvos em arquivos JSON na pasta '{DATA_DIR}'.")

# ----------------------------
# Footer (totals reflect this run's changes)
# ----------------------------
show_persistence_warnings()
totals = state.summary()
st.sidebar.markdown("---")
st.sidebar.markdown(f"Total valor materiais: **{format_money(totals['total_value'])}**")
st.sidebar.markdown(f"Total custo produção: **{format_money(totals['total_cost'])}**")

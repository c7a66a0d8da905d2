import streamlit as st
from datetime import date
import logging

from inspection_report.config import Config
from inspection_report.errors import ImageDecodeError, InvalidReportFile, ReportStructureError, UnsupportedImageError
from inspection_report.report import Report, export_report, import_report, report_filename
from inspection_report.report.assets import data_url_to_bytes, image_to_data_url
from inspection_report.report.dates import format_fr, range_label
from inspection_report.reporting.pdf import build_report_pdf

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(page_title=Config.APP_TITLE, layout=Config.APP_LAYOUT, page_icon=Config.APP_ICON)


# ===== STATE =====

def _new_report() -> Report:
    report = Report()
    report.add_site()
    return report


if "report" not in st.session_state:
    st.session_state["report"] = _new_report()
    st.session_state["form_rev"] = 0

report: Report = st.session_state["report"]


def _key(*parts) -> str:
    # Widget keys are scoped to the form revision
    return "_".join(str(p) for p in (st.session_state["form_rev"], *parts))


def _bump():
    st.session_state["form_rev"] += 1
    st.rerun()


def _preview(src: str, width: int):
    try:
        st.image(data_url_to_bytes(src) if src.startswith("data:") else src, width=width)
    except ImageDecodeError:
        st.caption("Image illisible")


st.title(f"{Config.APP_ICON} {Config.APP_TITLE}")

# ===== SIDEBAR: IMPORT / EXPORT =====
st.sidebar.header("💾 Sauvegarde")

json_file = st.sidebar.file_uploader("Importer JSON", type=["json"], key="json_import")
if json_file is not None and st.session_state.get("json_imported") != json_file.file_id:
    try:
        # The current report is replaced only when the whole file parses
        st.session_state["report"] = import_report(json_file.getvalue())
        st.session_state["json_imported"] = json_file.file_id
        _bump()
    except InvalidReportFile as e:
        st.session_state["json_imported"] = json_file.file_id
        st.sidebar.error(str(e))

if st.sidebar.button("🗑️ Nouveau rapport", use_container_width=True):
    st.session_state["report"] = _new_report()
    _bump()

# ===== EN-TÊTE =====
st.header("En-tête")
col_logo, col_fields = st.columns([1, 3])

with col_logo:
    logo_file = st.file_uploader("Logo", type=["png", "jpg", "jpeg", "gif", "webp"], key=_key("logo"))
    if logo_file is not None:
        try:
            report.logo_data_url = image_to_data_url(logo_file.getvalue(), logo_file.name)
        except UnsupportedImageError as e:
            st.error(f"Logo refusé : {e}")
    if report.logo_data_url:
        _preview(report.logo_data_url, 120)
        if st.button("Logo par défaut"):
            report.logo_data_url = None
            _bump()

with col_fields:
    c1, c2 = st.columns(2)
    report.header_code = c1.text_input("Code", report.header_code, key=_key("code"))
    report.header_version = c2.text_input("Version", report.header_version, key=_key("version"))
    report.header_title = st.text_input("Titre", report.header_title, key=_key("title"))
    report.client = st.text_input("Client", report.client, key=_key("client"))

# ===== DATES =====
st.subheader("Dates de contrôle")
c_date, c_add = st.columns([3, 1])
picked = c_date.date_input("Date", value=date.today(), key=_key("date_pick"), format="DD/MM/YYYY")
if c_add.button("➕ Ajouter la date"):
    report.add_date(picked.isoformat())
    st.rerun()

if report.dates_controle:
    chips = st.columns(min(len(report.dates_controle), 6))
    for i, iso in enumerate(report.dates_controle):
        if chips[i % len(chips)].button(f"✖ {format_fr(iso)}", key=_key("date_rm", iso)):
            report.remove_date(iso)
            st.rerun()
st.caption(f"Libellé : {range_label(report.dates_controle)}")

# ===== 1. POINTS DE CONTRÔLE =====
st.header("1. Points de contrôle")

for s_idx, site in enumerate(report.sites):
    with st.expander(f"Site : {site.name or '—'}", expanded=True):
        c_name, c_rm = st.columns([4, 1])
        site.name = c_name.text_input("Nom du site", site.name, key=_key("site", s_idx, "name"))
        if c_rm.button("Supprimer le site", key=_key("site", s_idx, "rm")):
            report.remove_site(s_idx)
            _bump()

        for p_idx, point in enumerate(site.points):
            k = ("pt", s_idx, p_idx)
            st.markdown(f"**Point {p_idx + 1}**")
            c1, c2, c3 = st.columns(3)
            point.point = c1.text_area("Point vérifié", point.point, key=_key(*k, "point"))
            point.non_conformite = c2.text_area("Non-conformité", point.non_conformite, key=_key(*k, "nc"))
            point.action = c3.text_area("Action immédiate", point.action, key=_key(*k, "action"))
            point.preuves_text = st.text_area("Preuves / Observations", point.preuves_text,
                                              key=_key(*k, "preuves"))

            uploads = st.file_uploader("Photos", type=["png", "jpg", "jpeg", "gif", "webp"],
                                       accept_multiple_files=True, key=_key(*k, "photos"))
            accepted = []
            for upload in uploads or []:
                try:
                    accepted.append(image_to_data_url(upload.getvalue(), upload.name))
                except UnsupportedImageError as e:
                    st.warning(f"Photo refusée : {e}")
            if accepted:
                point.add_proofs(accepted)

            for pr_idx, proof in enumerate(point.proofs):
                c_img, c_cap, c_pos, c_del = st.columns([1, 3, 1, 1])
                with c_img:
                    _preview(proof.src, 90)
                proof.caption = c_cap.text_input("Légende", proof.caption, key=_key(*k, "cap", pr_idx))
                proof.pos = c_pos.selectbox(
                    "Position", ["after", "before"], index=0 if proof.pos == "after" else 1,
                    format_func=lambda v: "Après" if v == "after" else "Avant",
                    key=_key(*k, "pos", pr_idx),
                )
                if c_del.button("✖", key=_key(*k, "del", pr_idx)):
                    point.remove_proof(pr_idx)
                    _bump()

            if st.button("Supprimer le point", key=_key(*k, "rm")):
                site.remove_point(p_idx)
                _bump()
            st.divider()

        if st.button("➕ Ajouter un point", key=_key("site", s_idx, "add")):
            site.add_point()
            st.rerun()

if st.button("➕ Ajouter un site"):
    report.add_site()
    st.rerun()

# ===== 2. / 3. / 4. =====
st.header("2. Constatations générales")
report.constatations = st.text_area("Texte (HTML accepté)", report.constatations, height=180,
                                    key=_key("constatations"))
st.header("3. Recommandations globales")
report.recommandations = st.text_area("Texte (HTML accepté)", report.recommandations, height=180,
                                      key=_key("recommandations"))
st.header("4. Signature")
report.controleur = st.text_input("Contrôleur", report.controleur, key=_key("controleur"))

# ===== JSON EXPORT =====
st.sidebar.download_button(
    label="📤 Exporter JSON",
    data=export_report(report).encode("utf-8"),
    file_name=report_filename(report, "json"),
    mime="application/json",
    use_container_width=True,
)

# ===== PDF EXPORT =====
st.sidebar.markdown("---")
st.sidebar.header("📄 Export PDF")

if st.sidebar.button("Générer le PDF", use_container_width=True):
    try:
        result = build_report_pdf(report)
        st.session_state["pdf"] = (result.pdf_bytes, result.filename)
        for warning in result.report.warnings:
            st.sidebar.warning(warning)
        failed = result.report.failed_images
        if failed:
            st.sidebar.warning(
                f"{len(failed)} photo(s) non rendue(s) sur {len(result.report.images)}."
            )
        for overflow in result.report.overflows:
            st.sidebar.info(overflow)
    except ReportStructureError as e:
        st.sidebar.error(f"Rapport invalide : {e}")

if "pdf" in st.session_state:
    pdf_bytes, pdf_name = st.session_state["pdf"]
    st.sidebar.download_button(
        label="📥 Télécharger le PDF",
        data=pdf_bytes,
        file_name=pdf_name,
        mime="application/pdf",
        use_container_width=True,
    )

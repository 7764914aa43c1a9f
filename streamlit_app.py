# streamlit_app.py
import os
import sys

import streamlit as st
from dotenv import load_dotenv

# Add project root to sys.path to allow 'from preference_center...' imports
# when the script is launched with `streamlit run` from a source checkout.
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from preference_center.clients.api_client import PreferencesAPI  # noqa: E402
from preference_center.clients.preferences_form import FormState, Phase, PreferencesForm  # noqa: E402
from preference_center.core.settings import Settings, get_settings  # noqa: E402

# --- App Configuration & Initialization ---
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

try:
    cfg: Settings = get_settings()
except Exception as e:
    st.error(f"Error loading application settings. Please check your .env file. Error: {e}")
    st.stop()

UI_STRINGS = {
    "page_title": "Email Preferences",
    "missing_id": "This link is missing a customer id. Open the link from your email again.",
    "save_button": "Save Preferences",
    "cancel_button": "Cancel",
    "unsubscribe_button": "Unsubscribe from all",
    "confirm_button": "Yes, continue",
    "back_button": "No, go back",
    "success_title": "Preferences Updated",
    "success_body": "Your email preferences have been saved. You can close this page.",
}

st.set_page_config(page_title=UI_STRINGS["page_title"], layout="centered")

encoded_id = st.query_params.get("id")
if not encoded_id:
    st.warning(UI_STRINGS["missing_id"])
    st.stop()

# --- Initialize Session State (one controller per page session) ---
if "api_client" not in st.session_state:
    st.session_state.api_client = PreferencesAPI(cfg.PREFERENCES_API_URL)
if st.session_state.get("encoded_id") != encoded_id:
    st.session_state.encoded_id = encoded_id
    st.session_state.form = PreferencesForm(st.session_state.api_client, encoded_id)
    st.session_state.form_state = st.session_state.form.load()

form: PreferencesForm = st.session_state.form


def apply(new_state: FormState) -> None:
    st.session_state.form_state = new_state
    st.rerun()


state: FormState = st.session_state.form_state

toasts, state = form.take_toasts(state)
st.session_state.form_state = state
for toast in toasts:
    st.toast(toast.message, icon="✅" if toast.kind == "success" else "⚠️")

# --- Success view ---
if state.phase == Phase.SUCCESS:
    st.title(UI_STRINGS["success_title"])
    st.write(UI_STRINGS["success_body"])
    st.stop()

# --- Header ---
st.title(state.title)
if state.subtitle:
    st.caption(state.subtitle)

if state.phase == Phase.ERROR:
    st.stop()

# --- Topics ---
for row in state.rows:
    checked = st.toggle(
        row.name,
        value=row.subscribed,
        key=f"topic-{row.id}-{row.subscribed}",
        disabled=not state.editable,
    )
    if row.description:
        st.markdown(row.description)
    if checked != row.subscribed:
        apply(form.toggle(state, row.id, checked))

st.divider()

# --- Confirmation panel ---
if state.awaiting_confirmation:
    st.warning(state.prompt)
    col1, col2 = st.columns(2)
    if col1.button(UI_STRINGS["confirm_button"], key="confirm_btn", use_container_width=True):
        apply(form.confirm(state))
    if col2.button(UI_STRINGS["back_button"], key="dismiss_btn", use_container_width=True):
        apply(form.dismiss(state))
    st.stop()

# --- Actions ---
col1, col2, col3 = st.columns(3)
if col1.button(UI_STRINGS["save_button"], key="save_btn", type="primary", disabled=state.buttons_disabled):
    apply(form.save(state))
if col2.button(UI_STRINGS["cancel_button"], key="cancel_btn", disabled=state.buttons_disabled):
    apply(form.request_cancel(state))
if col3.button(UI_STRINGS["unsubscribe_button"], key="unsubscribe_btn", disabled=state.buttons_disabled):
    apply(form.request_unsubscribe_all(state))

# --- To run this app: streamlit run streamlit_app.py -- then open ?id=<base64 customer id> ---
# Ensure the FastAPI server (preference_center.main:app) is running separately.

import logging

import pandas as pd
import requests
import streamlit as st

from wp_sites import SiteInput, SiteStore, WordPressError, build_api_url
from wp_sites.config import Settings, configure_logging

# --- CONFIGURATION ---

settings = Settings.from_env()
# The encryption key can also be set in st.secrets as ENCRYPTION_KEY
settings.encryption_key = st.secrets.get("ENCRYPTION_KEY", settings.encryption_key)
configure_logging(settings.log_level)
logger = logging.getLogger("wp_sites.app")

# Everything a save or validation can fail with; shown to the user as an error
SITE_ERRORS = (WordPressError, requests.RequestException, ValueError, LookupError)


@st.cache_resource
def get_store() -> SiteStore:
    return SiteStore.from_settings(settings)


def clean_password(value: str) -> str:
    # Application passwords are shown with spaces; WordPress accepts them without
    return "".join(value.split())


def save_site(site_input: SiteInput) -> bool:
    try:
        with st.spinner("Validating site credentials..."):
            profile = get_store().upsert_site(site_input)
    except SITE_ERRORS as e:
        logger.warning("Unable to save site %s: %s", site_input.name, e)
        st.error(f"Unable to save site: {e}")
        return False
    st.success(f"Site '{profile.name}' {'updated' if site_input.id else 'added'}.")
    return True


store = get_store()

st.title("WordPress Sites")
st.caption("Connection profiles and application passwords for your WordPress sites")

with st.sidebar.expander("Encryption key"):
    st.info("""
    Passwords are encrypted with a key. Set your own in `st.secrets`:
    ```
    ENCRYPTION_KEY = "a-unique-and-very-secret-key-at-least-32-chars"
    ```
    Changing the key makes previously stored passwords unreadable.
    """)

# --- ADD SITE ---

st.subheader("Add site")
with st.expander("How do I create an application password?", expanded=False):
    st.markdown("""
    1. Log in to WordPress as the user the site should publish as
    2. Go to **Users → Profile**
    3. Scroll to **Application Passwords**, enter a name and click **Add New Application Password**
    4. Copy the generated password exactly
    """)

with st.form("add_site_form", clear_on_submit=True):
    name = st.text_input("Site name")
    base_url = st.text_input("Site URL", placeholder="https://example.com")
    rest_base = st.text_input("REST base", placeholder="/wp-json/wp/v2/")
    username = st.text_input("WordPress username")
    app_password = st.text_input("Application password", type="password")
    if st.form_submit_button("Validate and save", type="primary"):
        if all([name, base_url, username, app_password]):
            if save_site(SiteInput(name, base_url, username, clean_password(app_password), rest_base)):
                st.rerun()
        else:
            st.error("Name, URL, username and password are required.")

# --- SITE LIST ---

st.subheader("Sites")
sites = store.list_sites()
if not sites:
    st.info("No sites configured. Add a WordPress site to get started.")
else:
    st.dataframe(
        pd.DataFrame([
            {
                "Name": site.name,
                "URL": site.base_url,
                "User": site.credentials.username,
                "Validated": site.validated_at or "never",
            }
            for site in sites
        ]),
        use_container_width=True,
        hide_index=True,
    )

    for site in sites:
        with st.container(border=True):
            c1, c2, c3 = st.columns([2, 1, 1])
            c1.markdown(f"**{site.name}** (`{site.base_url}`)")
            if c2.button("Revalidate", key=f"revalidate_{site.id}", use_container_width=True):
                try:
                    with st.spinner("Validating site credentials..."):
                        store.revalidate_site(site.id)
                    st.success("Connection validated")
                    st.rerun()
                except SITE_ERRORS as e:
                    st.error(f"Validation failed: {e}")
            confirm = c3.checkbox("Confirm delete", key=f"confirm_{site.id}")
            if c3.button("Delete", key=f"delete_{site.id}", disabled=not confirm, use_container_width=True):
                store.remove_site(site.id)
                st.rerun()

            st.code(build_api_url(site, ""), language=None)

            with st.expander("Edit site"):
                with st.form(f"edit_site_{site.id}"):
                    new_name = st.text_input("Site name", value=site.name)
                    new_url = st.text_input("Site URL", value=site.base_url)
                    new_rest = st.text_input("REST base", value=site.rest_base or "")
                    new_user = st.text_input("WordPress username", value=site.credentials.username)
                    new_password = st.text_input(
                        "Application password", type="password",
                        help="Leave empty to keep the stored password",
                    )
                    if st.form_submit_button("Validate and update"):
                        password = clean_password(new_password) or site.credentials.application_password
                        if save_site(SiteInput(new_name, new_url, new_user, password, new_rest, id=site.id)):
                            st.rerun()

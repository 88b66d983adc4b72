import streamlit as st
import pandas as pd
import requests

# ========================
# CONFIG
# ========================
BASE_URL = "http://127.0.0.1:3000"

st.set_page_config(
    page_title="Salesforce CSV Loader - Streamlit",
    layout="wide"
)

# ========================
# STATE VARIABLES
# ========================
# One requests.Session per browser tab keeps the gateway's session cookie
if "http" not in st.session_state:
    st.session_state.http = requests.Session()

if "objects" not in st.session_state:
    st.session_state.objects = []

http = st.session_state.http


def show_error(resp):
    try:
        message = resp.json().get("error", resp.text)
    except ValueError:
        message = resp.text
    st.error(f"{resp.status_code}: {message}")


# Title
st.title("Salesforce CSV Loader (Streamlit Version)")

st.markdown("""
Connect with a Salesforce session → pick an object → review its fields →
Upload a CSV to **insert**, **update** or **upsert** records.
""")

try:
    status_resp = http.get(f"{BASE_URL}/api/auth/status")
except requests.RequestException as e:
    st.error(f"Cannot reach the loader API at {BASE_URL}: {e}")
    st.stop()

if status_resp.status_code != 200:
    show_error(status_resp)
    st.stop()
status = status_resp.json()

# 1. AUTHENTICATION
st.header("1. Connect to Salesforce")

if not status.get("authenticated"):
    st.markdown(f"[Log in with Salesforce OAuth]({BASE_URL}/auth/salesforce) or paste a session below.")

    session_id = st.text_input("Session ID", type="password")
    instance_url = st.text_input("Instance URL", placeholder="https://yourdomain.my.salesforce.com")

    if st.button("Connect"):
        with st.spinner("Verifying session..."):
            resp = http.post(
                f"{BASE_URL}/api/auth/session",
                json={"sessionId": session_id, "instanceUrl": instance_url},
            )
            if resp.status_code != 200:
                show_error(resp)
            else:
                st.success(resp.json()["message"])
                st.rerun()
    st.stop()

user_info = status.get("userInfo") or {}
st.success(f"Connected as {user_info.get('name') or user_info.get('preferred_username', 'user')} "
           f"via {status.get('authMethod')}")

col_info, col_logout = st.columns(2)
with col_info:
    if st.button("Show session info"):
        st.json(http.get(f"{BASE_URL}/api/auth/session-info").json())
with col_logout:
    if st.button("Log out"):
        http.post(f"{BASE_URL}/api/auth/logout")
        st.session_state.objects = []
        st.rerun()

# 2. OBJECTS + FIELDS
st.header("2. Objects & Fields")

if not st.session_state.objects:
    with st.spinner("Loading objects..."):
        resp = http.get(f"{BASE_URL}/api/salesforce/objects")
        if resp.status_code != 200:
            show_error(resp)
            st.stop()
        st.session_state.objects = resp.json()

objects = st.session_state.objects
labels = {o["name"]: f"{o['label']} ({o['name']})" for o in objects}
object_name = st.selectbox("Object", list(labels), format_func=labels.get)

fields = []
if object_name:
    resp = http.get(f"{BASE_URL}/api/salesforce/objects/{object_name}/fields")
    if resp.status_code != 200:
        show_error(resp)
    else:
        fields = resp.json()
        df_fields = pd.DataFrame(fields, columns=["label", "name", "type", "required"])
        st.dataframe(df_fields, use_container_width=True)

# 3. CSV UPLOAD
st.header("3. Upload CSV")

operation = st.radio("Operation", ["insert", "update", "upsert"], horizontal=True)

external_id_field = None
if operation == "upsert":
    external_id_field = st.selectbox("External ID field", [f["name"] for f in fields])
if operation == "update":
    st.caption("Each row must carry the record Id.")

uploaded_file = st.file_uploader("Upload your CSV file", type=["csv"])

if uploaded_file is not None and object_name:
    if st.button("Upload & Process File"):
        with st.spinner("Uploading..."):
            data = {"objectName": object_name, "operation": operation}
            if external_id_field:
                data["externalIdField"] = external_id_field
            files = {"csvFile": (uploaded_file.name, uploaded_file.getvalue(), "text/csv")}

            resp = http.post(f"{BASE_URL}/api/upload", data=data, files=files)

            if resp.status_code != 200:
                show_error(resp)
            else:
                result = resp.json()
                c1, c2, c3 = st.columns(3)
                c1.metric("Total records", result["totalRecords"])
                c2.metric("Successful", result["successful"])
                c3.metric("Failed", result["failed"])

                if result["errors"]:
                    st.subheader("Failed records")
                    st.table(pd.DataFrame(
                        [{"Id": e["id"], "Errors": str(e["errors"])} for e in result["errors"]]
                    ))

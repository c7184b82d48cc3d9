import streamlit as st
import streamlit.components.v1 as components

from route_client import (
    Session,
    call_backend,
    check_backend_health,
    fetch_map_html,
    request_route,
    status_to_html,
)

# Page configuration
st.set_page_config(
    page_title="Free Route Finder",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better UI
st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        color: #4285f4;
        text-align: center;
        padding: 1rem 0;
        font-weight: bold;
    }
    .info-box {
        background-color: #eef;
        color: #222;
        padding: 10px;
        border-radius: 6px;
        margin: 10px 0;
        text-align: left;
    }
    .success-box {
        padding: 1rem;
        background-color: #207a27;
        border-radius: 0.5rem;
        border-left: 4px solid #43A047;
        margin: 1rem 0;
    }
    .stButton>button, .stFormSubmitButton>button {
        width: 100%;
        background-color: #4285f4;
        color: white;
        border-radius: 4px;
        padding: 0.5rem 1rem;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)

MAP_HEIGHT = 500


def render_login_page() -> Session | None:
    """Shows the login form. Returns a Session once the backend accepts it."""
    st.markdown('<div class="main-header">Login to Free Route Finder</div>', unsafe_allow_html=True)

    _, middle, _ = st.columns([1, 1, 1])
    with middle:
        with st.form("login_form"):
            username = st.text_input("Username", placeholder="Username")
            password = st.text_input("Password", placeholder="Password", type="password")
            submitted = st.form_submit_button("Login")

    if not submitted:
        return None

    if not username.strip() or not password.strip():
        st.error("Please enter valid credentials")
        return None

    response = call_backend("POST", "/login", {"username": username, "password": password})
    if "error" in response:
        st.error(response["error"])
        return None
    return Session(session_id=response["session_id"], username=response["username"])


def render_route_finder(session: Session):
    """Route search view. Everything it shows is scoped to `session`."""
    st.markdown('<div class="main-header">Multi-Route Traffic Finder</div>', unsafe_allow_html=True)

    col_start, col_end, col_button = st.columns([3, 3, 1])
    with col_start:
        start = st.text_input("Starting Point", placeholder="Starting Point", key="start")
    with col_end:
        end = st.text_input("Destination", placeholder="Destination", key="end")
    with col_button:
        st.write("")
        st.write("")
        get_route = st.button("Get Route")

    status_text = None
    if get_route:
        with st.spinner("Finding routes and analyzing traffic..."):
            response = request_route(session, start, end)
        if "error" in response:
            st.error(f"Error: {response['error']}")
            if response.get("status_code") == 401:
                st.session_state.pop("session", None)
                st.rerun()
        # Blank input is answered locally and never reaches the backend
        status_text = response.get("status")

    if status_text is None:
        status = call_backend("GET", f"/status/{session.session_id}")
        status_text = status.get("status") or status.get("error", "")
    st.markdown(f'<div class="info-box">{status_to_html(status_text)}</div>', unsafe_allow_html=True)

    map_html = fetch_map_html(session)
    if map_html:
        components.html(map_html, height=MAP_HEIGHT)
    else:
        st.warning("⚠️ Map unavailable. Check the backend connection.")


def render_sidebar(session: Session | None, backend_status: bool):
    with st.sidebar:
        st.header("⚙️ Settings")

        if backend_status:
            st.markdown('<div class="success-box">✅ Backend Connected</div>', unsafe_allow_html=True)
        else:
            st.markdown('<div class="info-box">⚠️ Backend Disconnected<br><small>Run: <code>python run.py</code> in backend folder</small></div>', unsafe_allow_html=True)

        if session is not None:
            st.divider()
            st.subheader("📊 Session Info")
            st.write(f"**User:** {session.username}")
            st.write(f"**Session ID:** `{session.session_id[:8]}...`")

        st.divider()
        st.subheader("🚦 Traffic Legend")
        st.write("🟢 Green: Low")
        st.write("🟡 Yellow: Medium")
        st.write("🔴 Red: High")


def main():
    # The session lives only in this page's state and is handed to the views explicitly
    session = st.session_state.get("session")
    backend_status = check_backend_health()
    render_sidebar(session, backend_status)

    if not backend_status:
        st.warning("⚠️ Backend is not running. Please start the backend server first.")
        st.code("cd backend && python run.py", language="bash")
        return

    if session is None:
        session = render_login_page()
        if session is not None:
            st.session_state["session"] = session
            st.rerun()
        return

    render_route_finder(session)


main()

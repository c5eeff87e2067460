import streamlit as st
import pandas as pd
from datetime import datetime, timedelta, timezone

from dataflow_ui.config import get_config
from dataflow_ui.components import CardBuilder, ChartBuilder, render_freshness_badge
from dataflow_ui.hooks import (
    BackgroundLoop,
    sales_data_hook,
    user_analytics_hook,
    performance_metrics_hook,
    realtime_metrics_hook,
)
from dataflow_ui.models import DataFreshness, to_rows
from dataflow_ui.state import (
    BROWSER_ID_PARAM,
    DEMO_ACCOUNTS,
    LocalStorage,
    SessionStore,
    browser_origin,
    new_browser_id,
    session_provider,
    use_session,
)
from dataflow_ui.utils import APIClient, setup_logging
from dataflow_ui.utils import transforms as tf

st.set_page_config(
    page_title="DataFlow Analytics",
    page_icon="◆",
    layout="wide",
    initial_sidebar_state="expanded"
)

config = get_config()
setup_logging(config.log_level)

PUBLIC_PAGES = ["Home", "Login"]
PROTECTED_PAGES = ["Dashboard", "Analytics", "Reports", "Data Sources", "Settings", "Profile"]

# Static breakdowns shown on the analytics page
DEVICE_SHARE = [
    {"name": "Desktop", "value": 65},
    {"name": "Mobile", "value": 28},
    {"name": "Tablet", "value": 7},
]
TRAFFIC_SOURCES = [
    {"name": "Organic", "value": 45},
    {"name": "Direct", "value": 30},
    {"name": "Social Media", "value": 15},
    {"name": "Referral", "value": 10},
]

REPORT_TYPES = {
    "Sales Report": "sales",
    "Analytics Report": "analytics",
    "Performance Report": "performance",
}


def browser_id() -> str:
    """Per-browser id, kept in the URL so a reload restores the same session"""
    sid = st.query_params.get(BROWSER_ID_PARAM)
    if not sid:
        sid = new_browser_id()
        st.query_params[BROWSER_ID_PARAM] = sid
    return sid


def init_session_state():
    defaults = {
        'page': 'Home',
        'refresh_nonce': 0,
        'connected': False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value

    # One event loop, session store and hook set per browser session
    if 'runtime' not in st.session_state:
        st.session_state.runtime = BackgroundLoop().start()
    if 'client' not in st.session_state:
        st.session_state.client = APIClient(config.backend_url, timeout=config.request_timeout)
    if 'store' not in st.session_state:
        st.session_state.store = SessionStore(
            LocalStorage(config.storage_path, browser_origin(config.origin, browser_id())),
            login_delay=config.login_delay,
        )
    if 'hooks' not in st.session_state:
        fetch = st.session_state.client.fetch_async
        st.session_state.hooks = {
            'sales': sales_data_hook(fetch, config.request_timeout),
            'analytics': user_analytics_hook(fetch, config.request_timeout),
            'metrics': performance_metrics_hook(fetch, config.request_timeout),
        }
        st.session_state.realtime = realtime_metrics_hook(fetch, config.poll_interval, config.request_timeout)


init_session_state()

runtime: BackgroundLoop = st.session_state.runtime
client: APIClient = st.session_state.client


def navigate(page: str):
    st.session_state.page = page
    st.rerun()


def load(name: str):
    """Render-time hook call: refetch only when the refresh nonce changed"""
    hook = st.session_state.hooks[name]
    runtime.call(hook.use, dependencies=(st.session_state.refresh_nonce,))
    if hook.state.loading:
        with st.spinner("Loading..."):
            return runtime.run(hook.wait(), timeout=config.request_timeout + 5)
    return hook.state


def unmount_all():
    for hook in st.session_state.hooks.values():
        runtime.call(hook.unmount)
    runtime.call(st.session_state.realtime.unmount)


def page_header(title: str, subtitle: str):
    st.markdown(f"""
    <div style="margin-bottom: 24px;">
        <div style="font-size: 34px; font-weight: 700; background: linear-gradient(90deg, #2563eb 0%, #9333ea 100%); -webkit-background-clip: text; -webkit-text-fill-color: transparent;">{title}</div>
        <div style="color: #4b5563;">{subtitle}</div>
    </div>
    """, unsafe_allow_html=True)


# =============================================================================
# Sidebar
# =============================================================================

def render_sidebar():
    store = use_session()

    with st.sidebar:
        st.markdown("""
        <div style="text-align: center; padding: 20px 0; margin-bottom: 16px;">
            <div style="font-size: 36px; background: linear-gradient(135deg, #3b82f6 0%, #8b5cf6 100%); -webkit-background-clip: text; -webkit-text-fill-color: transparent;">◆</div>
            <div style="font-size: 18px; font-weight: 700; color: #111827;">DataFlow</div>
        </div>
        """, unsafe_allow_html=True)

        pages = PUBLIC_PAGES[:1] + PROTECTED_PAGES if store.is_authenticated else PUBLIC_PAGES
        current = st.session_state.page if st.session_state.page in pages else pages[0]
        choice = st.radio("Navigation", pages, index=pages.index(current), label_visibility="collapsed")
        if choice != st.session_state.page:
            navigate(choice)

        st.markdown("---")

        if store.is_authenticated:
            user = store.session
            st.markdown(f"**{user.name}**  \n{user.role}")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Refresh", use_container_width=True):
                    st.session_state.refresh_nonce += 1
                    st.rerun()
            with col2:
                if st.button("Logout", use_container_width=True):
                    unmount_all()
                    runtime.call(store.logout)
                    navigate("Home")

        st.session_state.connected = client.is_connected()
        if st.session_state.connected:
            st.success("Backend connected")
        else:
            st.error("Backend offline")
            st.code("python app.py", language=None)


# =============================================================================
# Public Pages
# =============================================================================

def render_home():
    store = use_session()

    st.markdown("""
    <div style="text-align: center; padding: 60px 0 40px 0;">
        <div style="font-size: 56px; font-weight: 800; color: #111827; line-height: 1.1;">
            Transform Your Data Into
            <span style="background: linear-gradient(90deg, #2563eb 0%, #9333ea 100%); -webkit-background-clip: text; -webkit-text-fill-color: transparent;">Insights</span>
        </div>
        <div style="font-size: 18px; color: #4b5563; max-width: 720px; margin: 24px auto 0 auto;">
            Sales, user engagement and system performance in one dashboard, with live metrics refreshed every few seconds.
        </div>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3 = st.columns(3)
    features = [
        (col1, "Real-time Analytics", "Live revenue, users, conversion and bounce rate cards."),
        (col2, "Reports", "Sales, engagement and performance reports with CSV export."),
        (col3, "Demo Accounts", "Sign in with any of the four demo users to explore."),
    ]
    for col, title, text in features:
        with col:
            CardBuilder.render_summary_panel(title, [(text, "", "#111827")])

    st.markdown("")
    target = "Dashboard" if store.is_authenticated else "Login"
    if st.button(f"Go to {target}", type="primary"):
        navigate(target)


def render_login():
    store = use_session()

    if store.is_authenticated:
        navigate("Dashboard")

    page_header("Welcome back", "Sign in to your DataFlow account")
    st.caption("Demo mode: your sign-in is remembered for this browser through the `sid` link parameter.")

    labels = [f"{a['name']} ({a['role']})" for a in DEMO_ACCOUNTS]
    picked = st.selectbox("Demo account", ["Custom"] + labels)
    account = DEMO_ACCOUNTS[labels.index(picked)] if picked != "Custom" else {"email": "", "password": ""}

    with st.form("login_form"):
        email = st.text_input("Email", value=account["email"])
        password = st.text_input("Password", value=account["password"], type="password")
        submitted = st.form_submit_button("Sign In", use_container_width=True)

    if submitted:
        with st.spinner("Signing in..."):
            ok = runtime.run(store.login(email, password))
        if ok:
            navigate("Dashboard")
        else:
            st.error("Invalid email or password")

    with st.expander("Demo credentials"):
        st.dataframe(
            pd.DataFrame(DEMO_ACCOUNTS)[["email", "password", "role"]],
            hide_index=True,
            use_container_width=True,
        )


# =============================================================================
# Dashboard
# =============================================================================

@st.fragment(run_every=timedelta(seconds=config.poll_interval))
def render_realtime_fragment():
    state = st.session_state.realtime.state
    snapshot = state.data

    freshness = DataFreshness.from_timestamp(snapshot.timestamp if snapshot else None)
    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown("#### Live Metrics")
    with col2:
        render_freshness_badge(freshness, compact=True)

    if snapshot is None:
        if state.loading:
            st.caption("Waiting for first snapshot...")
        return
    CardBuilder.render_realtime_cards(snapshot.metrics)


def render_dashboard():
    store = use_session()
    user = store.session

    runtime.call(st.session_state.realtime.mount)

    sales = load('sales')
    analytics = load('analytics')
    metrics = load('metrics')

    for state in (sales, analytics, metrics):
        if state.error:
            st.error(state.error)

    sales_data = sales.data or []
    analytics_data = analytics.data or []
    metrics_data = metrics.data or []

    col1, col2 = st.columns([3, 1])
    with col1:
        page_header(f"Welcome back, {user.name.split(' ')[0]}!", "Here's what's happening with your data today")
    with col2:
        CardBuilder.render_summary_panel("Last login", [(user.login_time.astimezone().strftime('%Y-%m-%d %H:%M:%S'), "", "#111827")])

    render_realtime_fragment()

    st.markdown("")
    tiles = [
        ("Total Sales Records", len(sales_data), ("#3b82f6", "#2563eb")),
        ("Analytics Data Points", len(analytics_data), ("#22c55e", "#16a34a")),
        ("Performance Metrics", len(metrics_data), ("#a855f7", "#9333ea")),
        ("Database Tables", 3, ("#f97316", "#ea580c")),
    ]
    for col, (label, value, gradient) in zip(st.columns(4), tiles):
        with col:
            CardBuilder.render_stat_tile(label, f"{value:,}", gradient)

    st.markdown("")
    s = tf.summarize_sales(sales_data)
    e = tf.summarize_engagement(analytics_data)
    m = tf.summarize_metrics(metrics_data)

    col1, col2, col3 = st.columns(3)
    with col1:
        CardBuilder.render_summary_panel("Sales Summary", [
            ("Total Records:", f"{s.records:,}", "#111827"),
            ("Total Revenue:", f"${s.total_revenue:,.0f}", "#16a34a"),
            ("Total Orders:", f"{s.total_orders:,}", "#2563eb"),
            ("Total Customers:", f"{s.total_customers:,}", "#9333ea"),
        ])
    with col2:
        CardBuilder.render_summary_panel("User Analytics", [
            ("Data Points:", f"{e.data_points:,}", "#111827"),
            ("Peak Users:", f"{e.peak_active_users:,}", "#16a34a"),
            ("Avg Session:", f"{e.avg_session_minutes:.1f}m", "#2563eb"),
            ("Best Bounce Rate:", f"{e.best_bounce_rate:.1f}%", "#9333ea"),
        ])
    with col3:
        CardBuilder.render_summary_panel("System Metrics", [
            ("Total Metrics:", f"{m.total_metrics:,}", "#111827"),
            ("Categories:", f"{m.categories:,}", "#16a34a"),
            ("Avg Performance:", f"{m.avg_performance:.1f}ms", "#2563eb"),
        ])

    sales_points = tf.sales_chart_points(sales_data)
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(ChartBuilder.create_chart(
            sales_points, 'area', 'revenue', x='month', title="Monthly Revenue (K$)", color="#3B82F6"
        ), use_container_width=True)
    with col2:
        st.plotly_chart(ChartBuilder.create_chart(
            sales_points, 'bar', 'orders', x='month', title="Monthly Orders", color="#10B981"
        ), use_container_width=True)

    grouped = tf.group_metrics_by_category(metrics_data)
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(ChartBuilder.create_multi_line_chart(
            tf.analytics_chart_points(analytics_data), 'date', ['active_users', 'new_users'],
            title="Active Users Trend"
        ), use_container_width=True)
    with col2:
        st.plotly_chart(ChartBuilder.create_chart(
            tf.category_breakdown(grouped), 'pie', 'value', x='name', title="Performance Categories"
        ), use_container_width=True)


# =============================================================================
# Analytics
# =============================================================================

def render_analytics():
    page_header("User Analytics", "Deep insights into user behavior and engagement patterns")

    state = load('analytics')
    if state.error:
        st.error(state.error)
    analytics_data = state.data or []

    e = tf.summarize_engagement(analytics_data)
    kpis = [
        ("Peak Active Users", f"{e.peak_active_users:,}", "#3B82F6"),
        ("Avg. Session Duration", f"{e.avg_session_minutes:.1f}m", "#10B981"),
        ("New Users", f"{int(tf.total(analytics_data, 'new_users')):,}", "#8B5CF6"),
        ("Best Bounce Rate", f"{e.best_bounce_rate:.1f}%", "#EF4444"),
    ]
    for col, (title, value, color) in zip(st.columns(4), kpis):
        with col:
            CardBuilder.render_metric_card(title, value, color)

    points = tf.engagement_points(analytics_data)
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(ChartBuilder.create_chart(
            points, 'line', 'session_duration', x='date', title="Average Session Duration (Minutes)", color="#3B82F6"
        ), use_container_width=True)
    with col2:
        st.plotly_chart(ChartBuilder.create_chart(
            points, 'area', 'bounce_rate', x='date', title="Bounce Rate Trend (%)", color="#EF4444"
        ), use_container_width=True)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(ChartBuilder.create_chart(
            DEVICE_SHARE, 'pie', 'value', title="Device Usage Distribution"
        ), use_container_width=True)
    with col2:
        st.plotly_chart(ChartBuilder.create_chart(
            TRAFFIC_SOURCES, 'pie', 'value', title="Traffic Source Breakdown"
        ), use_container_width=True)


# =============================================================================
# Reports
# =============================================================================

def build_report(kind: str):
    """Returns (rows, charts) for the chosen report"""
    if kind == 'sales':
        state = load('sales')
        rows = tf.sales_report_rows(state.data or [])
        charts = [
            ('bar', 'revenue', 'period', "Revenue Trend (K$)", "#3B82F6"),
            ('line', 'orders', 'period', "Orders Volume", "#10B981"),
        ]
    elif kind == 'analytics':
        state = load('analytics')
        rows = tf.analytics_report_rows(state.data or [])
        charts = [
            ('area', 'active_users', 'period', "Active Users Trend", "#10B981"),
            ('line', 'session_duration', 'period', "Session Duration (Minutes)", "#8B5CF6"),
        ]
    else:
        state = load('metrics')
        rows = tf.performance_report_rows(state.data or [])
        charts = [
            ('bar', 'count', 'category', "Metrics by Category", "#8B5CF6"),
            ('pie', 'avg_value', 'category', "Performance Distribution", "#8B5CF6"),
        ]
    return state, rows, charts


def render_reports():
    page_header("Reports & Analytics", "Generate comprehensive reports and export insights")

    label = st.radio("Report Type", list(REPORT_TYPES), horizontal=True)
    kind = REPORT_TYPES[label]

    state, rows, charts = build_report(kind)
    if state.error:
        st.error(state.error)

    col1, col2 = st.columns(2)
    for col, (chart_kind, y, x, title, color) in zip((col1, col2), charts):
        with col:
            st.plotly_chart(ChartBuilder.create_chart(
                rows, chart_kind, y, x=x, title=title, color=color
            ), use_container_width=True)

    df = pd.DataFrame(rows)
    st.markdown("#### Report Data")
    if df.empty:
        st.info("No data available for this report")
        return
    st.dataframe(df, hide_index=True, use_container_width=True)

    st.download_button(
        "Download CSV",
        data=df.to_csv(index=False),
        file_name=f"{kind}_report_{datetime.now(timezone.utc):%Y%m%d}.csv",
        mime="text/csv",
    )


# =============================================================================
# Profile
# =============================================================================

def render_profile():
    store = use_session()
    user = store.session

    page_header("Profile", "Manage your account settings and preferences")

    col1, col2 = st.columns([1, 2])
    with col1:
        st.image(
            f"https://ui-avatars.com/api/?name={user.name.replace(' ', '+')}&background=3B82F6&color=fff&size=128",
            width=128,
        )
        st.markdown(f"### {user.name}")
        st.markdown(f"{user.email}  \n**{user.role}**")
    with col2:
        CardBuilder.render_summary_panel("Account Information", [
            ("Full Name", user.name, "#111827"),
            ("Email", user.email, "#111827"),
            ("Role", user.role, "#2563eb"),
            ("Signed in", user.login_time.astimezone().strftime('%Y-%m-%d %H:%M:%S'), "#111827"),
        ])


# =============================================================================
# Data Sources & Settings
# =============================================================================

DATA_SOURCES = [
    ("sales", "Sales", "Monthly revenue, orders and customers"),
    ("analytics", "User Analytics", "Daily active users, sessions and bounce rate"),
    ("metrics", "Performance Metrics", "System and business metrics by category"),
]


def render_data_sources():
    page_header("Data Sources", "Collections served by the DataFlow API")

    for name, title, description in DATA_SOURCES:
        hook = st.session_state.hooks[name]
        state = load(name)
        records = state.data or []

        col1, col2, col3 = st.columns([3, 1, 1])
        with col1:
            st.markdown(f"**{title}**  \n{description}  \n`GET {hook.endpoint}`")
        with col2:
            st.metric("Records", f"{len(records):,}")
        with col3:
            if state.error:
                st.error("Unavailable")
            else:
                st.success("Connected")

        with st.expander(f"Raw {title.lower()} records"):
            if state.error:
                st.caption(state.error)
            elif records:
                st.dataframe(pd.DataFrame(to_rows(records)), hide_index=True, use_container_width=True)
            else:
                st.caption("No records")


def render_settings():
    page_header("Settings", "Connection and refresh settings for this dashboard")

    CardBuilder.render_summary_panel("Connection", [
        ("Backend URL", config.backend_url, "#111827"),
        ("Status", "Connected" if st.session_state.connected else "Disconnected",
         "#16a34a" if st.session_state.connected else "#dc2626"),
        ("Request timeout", f"{config.request_timeout:g}s", "#111827"),
    ])
    CardBuilder.render_summary_panel("Refresh", [
        ("Live metrics interval", f"{config.poll_interval:g}s", "#111827"),
        ("Log level", config.log_level, "#111827"),
    ])
    st.caption("Values come from DATAFLOW_* environment variables or a .env file.")


PAGES = {
    "Home": render_home,
    "Login": render_login,
    "Dashboard": render_dashboard,
    "Analytics": render_analytics,
    "Reports": render_reports,
    "Data Sources": render_data_sources,
    "Settings": render_settings,
    "Profile": render_profile,
}


def main():
    store: SessionStore = st.session_state.store
    runtime.call(store.restore_on_startup)

    with session_provider(store):
        render_sidebar()

        page = st.session_state.page
        if page in PROTECTED_PAGES and not store.is_authenticated:
            navigate("Login")

        # Polling only runs while the dashboard is on screen
        if page != "Dashboard":
            runtime.call(st.session_state.realtime.unmount)

        PAGES.get(page, render_home)()

    st.markdown("""
    <div style="text-align: center; padding: 24px 0; margin-top: 48px; border-top: 1px solid #e5e7eb; font-size: 11px; color: #9ca3af;">
        ◆ DataFlow Analytics | v1.0.0
    </div>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()

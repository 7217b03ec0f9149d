"""
Anime Dashboard
Main application file for the Streamlit dashboard.
"""

import streamlit as st

from animedash.auth.auth_state import AuthSession
from animedash.config.form_config import FormConfig
from animedash.config.logging_config import setup_logging
from animedash.config.settings import load_settings
from animedash.config.supabase_client import get_client
from animedash.data_entry.episode_generator import BulkEpisodeGenerator
from animedash.data_entry.form_controller import AnimeFormController
from animedash.data_entry.messages import MessageCategory, MessageType, Notice, UserMessage, AUTH_ISSUE
from animedash.errors import AuthRequired, BackendError, ConfigurationError, FormValidationError
from animedash.services.anime_service import AnimeService
from animedash.services.catalog import AnimeCatalog
from animedash.state.session import (
    clear_add_anime_state, get_add_anime_state, get_page_state, update_add_anime_state,
)


def init_services():
    """Create the client, auth session, catalog and service once per browser session."""
    if 'anime_service' in st.session_state:
        return

    settings = load_settings()
    setup_logging('animedash', settings.log_dir, settings.log_level)
    client = get_client(settings)

    auth = AuthSession(client, reset_redirect=settings.reset_redirect)
    auth.restore()
    catalog = AnimeCatalog(client, auth)
    st.session_state.auth = auth
    st.session_state.catalog = catalog
    st.session_state.anime_service = AnimeService(client, auth, catalog)


def show_login(auth: AuthSession):
    """Show login form in sidebar."""
    with st.sidebar:
        if auth.authenticated:
            st.markdown(f"Signed in as **{auth.user.email}**")
            if st.button("Sign out", key="logout_button"):
                auth.sign_out()
                st.rerun()
            return

        st.markdown("### Login")
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")

        col1, col2 = st.columns(2)
        if col1.button("Login", key="login_button"):
            result = auth.sign_in(email, password)
            if result.ok:
                st.rerun()
            UserMessage.show(result.error, MessageType.ERROR, MessageCategory.AUTH)
        if col2.button("Sign up", key="signup_button"):
            result = auth.sign_up(email, password)
            if result.ok:
                UserMessage.show(result.message or "Account created", MessageType.SUCCESS, MessageCategory.AUTH)
            else:
                UserMessage.show(result.error, MessageType.ERROR, MessageCategory.AUTH)
        if st.button("Forgot password", key="reset_button") and email:
            result = auth.reset_password(email)
            msg_type = MessageType.INFO if result.ok else MessageType.ERROR
            UserMessage.show(result.message or result.error, msg_type, MessageCategory.AUTH)


def show_catalog(catalog: AnimeCatalog, service: AnimeService):
    st.subheader("My Anime")
    page = get_page_state("catalog")
    notice = page.pop("notice", None)
    if notice is not None:
        notice.show()
    if catalog.loading:
        st.info("Loading...")
        return
    frame = catalog.to_frame()
    if frame.empty:
        st.info("No anime yet. Add one below.")
        return
    st.dataframe(frame.drop(columns=['id']), use_container_width=True, hide_index=True)

    titles = dict(zip(frame['id'], frame['title']))
    col1, col2, col3 = st.columns([3, 1, 1])
    anime_id = col1.selectbox("Manage", list(titles), format_func=titles.get, key="manage_anime")
    try:
        if col2.button("Archive", key="archive_anime"):
            service.update_anime(anime_id, {'is_archived': True})
            page["notice"] = Notice(f'Archived "{titles[anime_id]}"', MessageType.SUCCESS, MessageCategory.DATABASE)
            st.rerun()
        if col3.button("Delete", key="delete_anime"):
            service.delete_anime(anime_id)
            page["notice"] = Notice(f'Deleted "{titles[anime_id]}"', MessageType.SUCCESS, MessageCategory.DATABASE)
            st.rerun()
    except BackendError as e:
        UserMessage.show(e.backend_message or str(e), MessageType.ERROR, MessageCategory.DATABASE)
    except AuthRequired:
        UserMessage.show(AUTH_ISSUE, MessageType.ERROR, MessageCategory.AUTH)


def show_subtitles(controller: AnimeFormController, index: int, link_index: int):
    """Subtitle rows under one link: language plus a URL or an uploaded file."""
    link = controller.draft.episodes[index].links[link_index]
    languages = [''] + FormConfig.SUBTITLE_LANGUAGES
    for sub_index, subtitle in enumerate(link.subtitles):
        # Keyed by the row, not its position, so removing a sibling cannot shift values
        key = f"sub_{subtitle.form_key}"
        cols = st.columns([2, 3, 3, 1])
        language = cols[0].selectbox(
            "Language", languages,
            index=languages.index(subtitle.language) if subtitle.language in languages else 0,
            key=f"{key}_language")
        url = cols[1].text_input("Subtitle URL", value=subtitle.url, key=f"{key}_url")
        upload = cols[2].file_uploader("Or upload file", key=f"{key}_file",
                                       type=[ext.lstrip('.') for ext in FormConfig.SUBTITLE_FILE_EXTENSIONS])
        if language != subtitle.language:
            controller.update_subtitle(index, link_index, sub_index, 'language', language)
        if url != subtitle.url:
            controller.update_subtitle(index, link_index, sub_index, 'url', url)
        if upload is not None and upload.name != subtitle.file_name:
            controller.attach_subtitle_file(index, link_index, sub_index, upload.name)
        if cols[3].button("Remove", key=f"{key}_remove"):
            controller.remove_subtitle(index, link_index, sub_index)
            break

    if st.button("Add Subtitle", key=f"link_{link.form_key}_add_subtitle"):
        controller.add_subtitle(index, link_index)


def show_episode(controller: AnimeFormController, index: int):
    episode = controller.draft.episodes[index]
    key = f"ep_{episode.form_key}"
    platforms = [''] + FormConfig.SUPPORTED_PLATFORMS
    with st.expander(f"Episode {episode.episode_number}" + (f": {episode.title}" if episode.title else ""),
                     expanded=index == 0):
        col1, col2 = st.columns(2)
        title = col1.text_input("Episode Title", value=episode.title, key=f"{key}_title")
        duration = col2.text_input("Duration", value=episode.duration, key=f"{key}_duration",
                                   placeholder="e.g., 24:30")
        if title != episode.title:
            controller.update_episode(index, 'title', title)
        if duration != episode.duration:
            controller.update_episode(index, 'duration', duration)

        for link_index, link in enumerate(episode.links):
            link_key = f"link_{link.form_key}"
            cols = st.columns([2, 4, 1, 1])
            platform = cols[0].selectbox(
                "Platform", platforms,
                index=platforms.index(link.platform) if link.platform in platforms else 0,
                key=f"{link_key}_platform")
            url = cols[1].text_input("Episode URL *", value=link.url, key=f"{link_key}_url")
            quality = cols[2].text_input("Quality", value=link.quality, key=f"{link_key}_quality")
            if platform != link.platform:
                controller.update_link(index, link_index, 'platform', platform)
            if url != link.url:
                controller.update_link(index, link_index, 'url', url)
            if quality != link.quality:
                controller.update_link(index, link_index, 'quality', quality)
            if cols[3].button("Remove", key=f"{link_key}_remove"):
                controller.remove_link(index, link_index)
                break
            show_subtitles(controller, index, link_index)

        if st.button("Add Link", key=f"{key}_add_link"):
            controller.add_link(index)


def show_bulk_actions(generator: BulkEpisodeGenerator):
    st.markdown("#### Episode Management")
    col1, col2, col3 = st.columns(3)
    count = col1.number_input("Episodes to add", min_value=1, max_value=FormConfig.MAX_BULK_APPEND, value=1)
    if col1.button("Add Episodes"):
        generator.append_episodes(int(count))
    if col1.button("Quick Setup"):
        generator.quick_setup(int(count))

    template = col2.number_input("Template episode", min_value=1, value=1)
    if col2.button("Duplicate Episode"):
        generator.duplicate_episode(int(template) - 1)
    if col2.button("Remove Last Episode"):
        generator.remove_last_episode()

    platform = col3.selectbox("Platform for all", FormConfig.SUPPORTED_PLATFORMS)
    if col3.button("Set All Platform"):
        generator.set_all_platform(platform)
    duration = col3.text_input("Duration for all", placeholder="24:00")
    if col3.button("Set All Durations"):
        generator.set_all_durations(duration)
    quality = col3.text_input("Quality for all", placeholder="1080p")
    if col3.button("Set All Quality"):
        generator.set_all_quality(quality)
    confirm = col3.checkbox("I understand clearing links cannot be undone")
    if col3.button("Clear All Links"):
        generator.clear_all_links(confirmed=confirm)

    stats = generator.statistics()
    st.caption(f"{stats.total_links} links across {stats.episodes_with_links} of "
               f"{stats.episodes} episodes, {stats.total_subtitles} subtitles")


def save_add_anime(state, controller: AnimeFormController):
    state.draft = controller.draft
    state.version = controller.version
    update_add_anime_state(state)


def show_add_anime(service: AnimeService):
    state = get_add_anime_state()
    controller = AnimeFormController(state.draft, state.version)
    generator = BulkEpisodeGenerator(controller)
    draft = controller.draft

    st.subheader("Add New Anime")
    # Filled after the submit button runs so a new error shows on the same pass
    banner = st.container()

    col1, col2 = st.columns(2)
    for name, widget in (('title', col1), ('studio_name', col2), ('thumbnail_url', col1)):
        value = widget.text_input(name.replace('_', ' ').title(), value=getattr(draft, name),
                                  key=f"anime_{draft.form_key}_{name}")
        if value != getattr(draft, name):
            controller.set_field(name, value)
    description = st.text_area("Description", value=draft.description, key=f"anime_{draft.form_key}_description")
    if description != draft.description:
        controller.set_field('description', description)
    release_year = col1.number_input("Release Year", min_value=FormConfig.MIN_RELEASE_YEAR,
                                     max_value=FormConfig.max_release_year(), value=draft.release_year)
    if release_year != draft.release_year:
        controller.set_field('release_year', int(release_year))
    rating = col2.number_input("Rating (0-10)", min_value=FormConfig.MIN_RATING,
                               max_value=FormConfig.MAX_RATING, step=0.1, value=float(draft.rating))
    status = col2.selectbox("Status", FormConfig.STATUSES, index=FormConfig.STATUSES.index(draft.status))
    count = col1.number_input("Number of Episodes", min_value=FormConfig.MIN_EPISODES,
                              max_value=FormConfig.MAX_EPISODES, value=draft.episode_count)
    if rating != draft.rating:
        controller.set_field('rating', rating)
    if status != draft.status:
        controller.set_field('status', status)
    if count != draft.episode_count:
        controller.set_episode_count(int(count))

    genres = st.multiselect("Genres", FormConfig.ANIME_GENRES, default=draft.genres)
    for genre in set(genres) ^ set(draft.genres):
        controller.toggle_genre(genre)

    for index in range(len(draft.episodes)):
        show_episode(controller, index)
    show_bulk_actions(generator)

    submit_col, cancel_col = st.columns(2)
    if submit_col.button(f"Add Anime with {draft.episode_count} Episodes", type="primary"):
        state.success_message = None
        issue = controller.validate_for_submit()
        if issue is not None:
            state.form_error = issue.message
        else:
            try:
                report = service.submit(controller.draft)
            except FormValidationError as e:
                state.form_error = str(e)
            except AuthRequired:
                state.form_error = AUTH_ISSUE
            except BackendError as e:
                state.form_error = e.backend_message or str(e)
            else:
                title = report.anime.get('title', draft.title)
                state.success_message = f'Successfully added "{title}" with {draft.episode_count} episodes!'
                state.form_error = None
                controller.reset()
                save_add_anime(state, controller)
                st.rerun()
    if cancel_col.button("Cancel"):
        clear_add_anime_state()
        st.rerun()

    with banner:
        if state.success_message:
            st.success(state.success_message)
        if state.form_error:
            st.error(state.form_error)
    for notice in controller.drain_notices():
        notice.show()

    save_add_anime(state, controller)


def main():
    st.set_page_config(page_title="Anime Dashboard", page_icon="📺", layout="wide")
    try:
        init_services()
    except ConfigurationError as e:
        st.error(f"Failed to initialize Supabase: {str(e)}")
        st.stop()

    auth = st.session_state.auth
    show_login(auth)
    if not auth.authenticated:
        st.warning("Please log in to access this page")
        return

    show_catalog(st.session_state.catalog, st.session_state.anime_service)
    show_add_anime(st.session_state.anime_service)

"""Localized UI strings for the reel studio.

Every key exists for every supported language; the tests enforce it so a
missing error message never reaches the user as a ``KeyError``.
"""

from __future__ import annotations

from datetime import date
from typing import Dict

LANGUAGES = ("es", "en", "pt")
DEFAULT_LANGUAGE = "es"

LANGUAGE_NAMES = {"es": "Spanish", "en": "English", "pt": "Portuguese"}
SPEECH_LANGUAGE_CODES = {"es": "es-US", "en": "en-US", "pt": "pt-BR"}

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "subtitle": {
        "es": "Convierte noticias inmobiliarias en guiones virales para Reels.",
        "en": "Turn real-estate news into viral Reel scripts.",
        "pt": "Transforme notícias imobiliárias em roteiros virais para Reels.",
    },
    "errorTitle": {"es": "Error:", "en": "Error:", "pt": "Erro:"},
    "step1Title": {
        "es": "1. Elige tu fuente de contenido",
        "en": "1. Choose your content source",
        "pt": "1. Escolha sua fonte de conteúdo",
    },
    "tabNews": {"es": "Noticias", "en": "News", "pt": "Notícias"},
    "tabText": {"es": "Texto propio", "en": "Custom text", "pt": "Texto próprio"},
    "tabVideo": {"es": "Video", "en": "Video", "pt": "Vídeo"},
    "newsDescription": {
        "es": "Busca las noticias inmobiliarias más recientes para inspirar tu próximo Reel.",
        "en": "Fetch the latest real-estate news to inspire your next Reel.",
        "pt": "Busque as notícias imobiliárias mais recentes para inspirar seu próximo Reel.",
    },
    "newsButton": {
        "es": "Buscar noticias",
        "en": "Fetch news",
        "pt": "Buscar notícias",
    },
    "newsLoading": {
        "es": "Buscando noticias del sector...",
        "en": "Looking for industry news...",
        "pt": "Procurando notícias do setor...",
    },
    "customTextPlaceholder": {
        "es": "Pega aquí tu texto, idea o artículo...",
        "en": "Paste your text, idea or article here...",
        "pt": "Cole aqui seu texto, ideia ou artigo...",
    },
    "customTextButton": {
        "es": "Generar guion desde texto",
        "en": "Generate script from text",
        "pt": "Gerar roteiro a partir do texto",
    },
    "videoDescription": {
        "es": "Sube un video y lo transformaremos en un guion para Reel.",
        "en": "Upload a video and we will turn it into a Reel script.",
        "pt": "Envie um vídeo e vamos transformá-lo em um roteiro para Reel.",
    },
    "videoSelect": {
        "es": "Selecciona un archivo de video",
        "en": "Select a video file",
        "pt": "Selecione um arquivo de vídeo",
    },
    "videoFileSelected": {
        "es": "Archivo seleccionado:",
        "en": "Selected file:",
        "pt": "Arquivo selecionado:",
    },
    "videoDropzone": {
        "es": "MP4, MOV, WEBM y otros formatos de video",
        "en": "MP4, MOV, WEBM and other video formats",
        "pt": "MP4, MOV, WEBM e outros formatos de vídeo",
    },
    "videoButton": {
        "es": "Generar guion desde video",
        "en": "Generate script from video",
        "pt": "Gerar roteiro a partir do vídeo",
    },
    "step2Title": {
        "es": "2. Selecciona una noticia",
        "en": "2. Select a news item",
        "pt": "2. Selecione uma notícia",
    },
    "selectNewsButton": {
        "es": "Crear guion",
        "en": "Create script",
        "pt": "Criar roteiro",
    },
    "generatingScript": {
        "es": "Generando guion para",
        "en": "Generating script for",
        "pt": "Gerando roteiro para",
    },
    "transcribingScript": {
        "es": "Analizando el video",
        "en": "Analyzing the video",
        "pt": "Analisando o vídeo",
    },
    "backButton": {"es": "Volver", "en": "Back", "pt": "Voltar"},
    "basedOn": {"es": "Basado en", "en": "Based on", "pt": "Baseado em"},
    "listenButton": {"es": "Escuchar", "en": "Listen", "pt": "Ouvir"},
    "stopAudio": {"es": "Detener", "en": "Stop", "pt": "Parar"},
    "generatingAudio": {
        "es": "Generando audio...",
        "en": "Generating audio...",
        "pt": "Gerando áudio...",
    },
    "editButton": {"es": "Editar", "en": "Edit", "pt": "Editar"},
    "downloadButton": {
        "es": "Descargar Word",
        "en": "Download Word",
        "pt": "Baixar Word",
    },
    "editPanelTitle": {
        "es": "¿Qué quieres cambiar del guion?",
        "en": "What would you like to change in the script?",
        "pt": "O que você quer mudar no roteiro?",
    },
    "editPanelPlaceholder": {
        "es": "Ej: hazlo más corto y con un tono más divertido",
        "en": "E.g. make it shorter and more playful",
        "pt": "Ex: deixe mais curto e com um tom mais divertido",
    },
    "regenerateButton": {
        "es": "Regenerar guion",
        "en": "Regenerate script",
        "pt": "Regenerar roteiro",
    },
    "detailedScriptTitle": {
        "es": "Guion detallado",
        "en": "Detailed script",
        "pt": "Roteiro detalhado",
    },
    "hookTitle": {"es": "Gancho", "en": "Hook", "pt": "Gancho"},
    "developmentTitle": {"es": "Desarrollo", "en": "Development", "pt": "Desenvolvimento"},
    "ctaTitle": {
        "es": "Llamado a la acción",
        "en": "Call to action",
        "pt": "Chamada para ação",
    },
    "audioTextTitle": {
        "es": "Texto para locución",
        "en": "Narration text",
        "pt": "Texto para locução",
    },
    "suggestionsTitle": {"es": "Sugerencias", "en": "Suggestions", "pt": "Sugestões"},
    "hashtagsTitle": {"es": "Hashtags", "en": "Hashtags", "pt": "Hashtags"},
    "thumbnailTitle": {
        "es": "Idea de miniatura",
        "en": "Thumbnail idea",
        "pt": "Ideia de miniatura",
    },
    "sourceTitle": {"es": "Fuente", "en": "Source", "pt": "Fonte"},
    "videoSummary": {
        "es": "Contenido extraído del video.",
        "en": "Content extracted from video.",
        "pt": "Conteúdo extraído do vídeo.",
    },
    "unknownError": {
        "es": "Ocurrió un error inesperado. Inténtalo de nuevo.",
        "en": "An unexpected error occurred. Please try again.",
        "pt": "Ocorreu um erro inesperado. Tente novamente.",
    },
    "emptyScriptError": {
        "es": "No se pudo generar el guion. La respuesta llegó vacía.",
        "en": "The script could not be generated. The response was empty.",
        "pt": "Não foi possível gerar o roteiro. A resposta veio vazia.",
    },
    "emptyContentError": {
        "es": "Escribe o pega algún contenido antes de generar.",
        "en": "Please write or paste some content before generating.",
        "pt": "Escreva ou cole algum conteúdo antes de gerar.",
    },
    "invalidVideoError": {
        "es": "El archivo seleccionado no es un video válido.",
        "en": "The selected file is not a valid video.",
        "pt": "O arquivo selecionado não é um vídeo válido.",
    },
    "emptyVideoError": {
        "es": "Selecciona un video antes de generar.",
        "en": "Please select a video before generating.",
        "pt": "Selecione um vídeo antes de gerar.",
    },
    "emptyVideoScriptError": {
        "es": "No se pudo extraer un guion del video.",
        "en": "No script could be extracted from the video.",
        "pt": "Não foi possível extrair um roteiro do vídeo.",
    },
    "editScriptError": {
        "es": "No se pudo editar el guion.",
        "en": "The script could not be edited.",
        "pt": "Não foi possível editar o roteiro.",
    },
    "audioPlayError": {
        "es": "No se pudo reproducir el audio.",
        "en": "The audio could not be played.",
        "pt": "Não foi possível reproduzir o áudio.",
    },
    "providersTitle": {"es": "Proveedores de IA", "en": "AI providers", "pt": "Provedores de IA"},
    "textProvider": {"es": "Texto", "en": "Text", "pt": "Texto"},
    "mediaProvider": {"es": "Video y voz", "en": "Video & voice", "pt": "Vídeo e voz"},
    "notConfigured": {"es": "sin configurar", "en": "not configured", "pt": "não configurado"},
    "providersNote": {
        "es": "Las claves se configuran en Streamlit Secrets o en el archivo .env local.",
        "en": "Keys are configured in Streamlit Secrets or the local .env file.",
        "pt": "As chaves são configuradas no Streamlit Secrets ou no arquivo .env local.",
    },
}


def t(key: str, language: str) -> str:
    """Return the display string for ``key`` in ``language``."""
    return TRANSLATIONS[key][language]


def format_date(value: date, language: str) -> str:
    if language == "en":
        return f"{value.month}/{value.day}/{value.year}"
    return f"{value.day}/{value.month}/{value.year}"

"""User-facing texts (the product speaks Brazilian Portuguese)."""

MISSING_FIELDS = "Por favor, preencha seu nome e descreva seu sonho."
INTERPRETATION_APOLOGY = "Desculpe, ocorreu um erro ao interpretar seu sonho. Tente novamente."
TRANSCRIPTION_FAILED = "Erro ao transcrever o áudio. Tente novamente."
MICROPHONE_UNAVAILABLE = "Não foi possível acessar o microfone."
BUSY = "Aguarde, ainda estou trabalhando no pedido anterior."
ALREADY_RECORDING = "A gravação já está em andamento."
NOTHING_TO_SPEAK = "Ainda não há interpretação para ouvir."
SESSION_CLOSED = "Esta sessão foi encerrada. Recarregue a página."
